from datetime import date

from app.tasks.celery_app import celery
from app.tasks import worker_jobs

@celery.task(name="app.tasks.jobs.purge_expired_refresh_tokens", ignore_result=True)
def purge_expired_refresh_tokens():
    return worker_jobs.purge_expired_refresh_tokens()

@celery.task(name="app.tasks.jobs.complete_past_bookings", autoretry_for=(ConnectionError,),
             retry_backoff=True, max_retries=3)
def complete_past_bookings(today: str | None = None):
    """``today`` as YYYY-MM-DD lets an operator re-run a missed day by hand."""
    return worker_jobs.complete_past_bookings(today=date.fromisoformat(today) if today else None)
