"""Availability engine: overlap rules on half-open stays."""
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.core.errors import ValidationError
from app.services import availability_service
from app.services.availability_service import (
    is_available,
    overlaps,
    suggest_alternatives,
    validate_stay,
)

from conftest import make_booking

CAT, TITLE = "deluxe-room", "Deluxe-201"


class TestOverlapPredicate:
    @pytest.mark.parametrize(
        "new, existing, expected",
        [
            ((date(2024, 6, 3), date(2024, 6, 4)), (date(2024, 6, 1), date(2024, 6, 5)), True),   # inside
            ((date(2024, 5, 30), date(2024, 6, 2)), (date(2024, 6, 1), date(2024, 6, 5)), True),  # tail overlaps
            ((date(2024, 5, 30), date(2024, 6, 9)), (date(2024, 6, 1), date(2024, 6, 5)), True),  # contains
            ((date(2024, 6, 1), date(2024, 6, 2)), (date(2024, 6, 1), date(2024, 6, 5)), True),   # same start
            ((date(2024, 6, 5), date(2024, 6, 8)), (date(2024, 6, 1), date(2024, 6, 5)), False),  # back-to-back
            ((date(2024, 5, 28), date(2024, 6, 1)), (date(2024, 6, 1), date(2024, 6, 5)), False), # ends on arrival
        ],
    )
    def test_overlaps(self, new, existing, expected):
        assert overlaps(*new, *existing) is expected


class TestIsAvailable:
    def test_room_without_bookings_is_available(self, db: Session):
        assert is_available(db, CAT, TITLE, date(2024, 6, 1), date(2024, 6, 30)) is True

    def test_end_to_end_deluxe_201(self, db: Session):
        make_booking(db, date(2024, 6, 1), date(2024, 6, 5))

        assert is_available(db, CAT, TITLE, date(2024, 6, 3), date(2024, 6, 4)) is False
        assert is_available(db, CAT, TITLE, date(2024, 6, 5), date(2024, 6, 8)) is True

    def test_same_check_in_is_not_available(self, db: Session):
        make_booking(db, date(2024, 6, 1), date(2024, 6, 5))
        assert is_available(db, CAT, TITLE, date(2024, 6, 1), date(2024, 6, 2)) is False

    def test_stay_wrapping_existing_booking_is_not_available(self, db: Session):
        make_booking(db, date(2024, 6, 10), date(2024, 6, 12))
        assert is_available(db, CAT, TITLE, date(2024, 6, 8), date(2024, 6, 15)) is False

    def test_cancelled_bookings_do_not_block(self, db: Session):
        make_booking(db, date(2024, 6, 1), date(2024, 6, 5), status="cancelled")
        assert is_available(db, CAT, TITLE, date(2024, 6, 2), date(2024, 6, 3)) is True

    def test_pending_and_completed_bookings_block(self, db: Session):
        make_booking(db, date(2024, 6, 1), date(2024, 6, 5), status="pending")
        make_booking(db, date(2024, 7, 1), date(2024, 7, 5), status="completed")
        assert is_available(db, CAT, TITLE, date(2024, 6, 4), date(2024, 6, 6)) is False
        assert is_available(db, CAT, TITLE, date(2024, 7, 2), date(2024, 7, 3)) is False

    def test_room_identity_is_category_and_title(self, db: Session):
        make_booking(db, date(2024, 6, 1), date(2024, 6, 5))
        assert is_available(db, CAT, "Deluxe-202", date(2024, 6, 2), date(2024, 6, 3)) is True
        assert is_available(db, "standard-room", TITLE, date(2024, 6, 2), date(2024, 6, 3)) is True

    def test_lookup_failure_reports_unavailable(self, db: Session, monkeypatch):
        def boom(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("statement timeout"))

        monkeypatch.setattr(availability_service, "find_conflicts", boom)
        assert is_available(db, CAT, TITLE, date(2024, 6, 1), date(2024, 6, 2)) is False


class TestValidateStay:
    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError) as exc:
            validate_stay(date(2024, 6, 5), date(2024, 6, 1))
        assert exc.value.code == "INVALID_DATE_RANGE"

    def test_zero_night_stay_rejected(self):
        with pytest.raises(ValidationError):
            validate_stay(date(2024, 6, 5), date(2024, 6, 5))

    def test_missing_dates_rejected(self):
        with pytest.raises(ValidationError):
            validate_stay(None, date(2024, 6, 5))


class TestSuggestions:
    def test_suggests_stays_after_blocking_booking(self, db: Session):
        make_booking(db, date(2024, 6, 1), date(2024, 6, 5))
        out = suggest_alternatives(db, CAT, TITLE, date(2024, 6, 3), date(2024, 6, 5))
        assert out[0] == {"checkIn": "2024-06-05", "checkOut": "2024-06-07", "nights": 2}

    def test_suggestions_skip_occupied_gaps(self, db: Session):
        make_booking(db, date(2024, 6, 1), date(2024, 6, 5))
        make_booking(db, date(2024, 6, 6), date(2024, 6, 10))
        out = suggest_alternatives(db, CAT, TITLE, date(2024, 6, 2), date(2024, 6, 5))
        # a 3-night stay does not fit in the 1-night gap on 06-05
        assert out[0]["checkIn"] == "2024-06-10"
        for s in out:
            assert not overlaps(date.fromisoformat(s["checkIn"]), date.fromisoformat(s["checkOut"]),
                                date(2024, 6, 6), date(2024, 6, 10))
