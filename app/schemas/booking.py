from datetime import date
from pydantic import BaseModel, Field
from typing import Optional

class BookingCreate(BaseModel):
    firstName: str = Field(min_length=1)
    lastName: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone: str = Field(min_length=1)
    roomType: Optional[str] = ""
    roomTitle: str = Field(min_length=1)
    roomCategory: str = Field(min_length=1)
    roomImage: Optional[str] = ""
    checkIn: date
    checkOut: date
    guests: int = Field(default=1, ge=1)
    specialRequests: Optional[str] = ""
    basePrice: int = Field(ge=0)
    taxAndFees: int = Field(default=0, ge=0)
    totalPrice: int = Field(ge=0)
    location: Optional[str] = ""

class BookingStatusUpdate(BaseModel):
    status: Optional[str] = None
    paymentStatus: Optional[str] = None

class BookingOut(BaseModel):
    id: str
    bookingId: str
    user: Optional[str] = None
    firstName: str
    lastName: str
    email: str
    phone: str
    roomType: str
    roomTitle: str
    roomCategory: str
    roomImage: str
    location: str
    checkIn: date
    checkOut: date
    nights: int
    guests: int
    specialRequests: str
    basePrice: int
    taxAndFees: int
    totalPrice: int
    status: str
    paymentStatus: str
    createdAt: Optional[str] = None

    @classmethod
    def from_model(cls, b) -> "BookingOut":
        return cls(
            id=b.id,
            bookingId=b.booking_id,
            user=b.user_id,
            firstName=b.first_name,
            lastName=b.last_name,
            email=b.email,
            phone=b.phone,
            roomType=b.room_type or "",
            roomTitle=b.room_title,
            roomCategory=b.room_category,
            roomImage=b.room_image or "",
            location=b.location or "",
            checkIn=b.check_in,
            checkOut=b.check_out,
            nights=b.nights,
            guests=b.guests,
            specialRequests=b.special_requests or "",
            basePrice=b.base_price,
            taxAndFees=b.tax_and_fees,
            totalPrice=b.total_price,
            status=b.status,
            paymentStatus=b.payment_status,
            createdAt=b.created_at.isoformat() if b.created_at else None,
        )
