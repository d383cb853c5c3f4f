from urllib.parse import urlparse, urlunparse, parse_qs, urlencode

from celery import Celery
from celery.schedules import crontab
from celery.signals import worker_ready
from app.core.config import settings


def broker_url(url: str) -> str:
    """rediss:// brokers need ssl_cert_reqs in the query string or Celery refuses them."""
    if not url or urlparse(url).scheme.lower() != "rediss":
        return url
    parsed = urlparse(url)
    qs = parse_qs(parsed.query)
    qs.setdefault("ssl_cert_reqs", ["CERT_NONE"])
    return urlunparse(parsed._replace(query=urlencode(qs, doseq=True)))


celery = Celery(
    "hotel",
    broker=broker_url(settings.REDIS_URL),
    backend=broker_url(settings.REDIS_URL),
    include=["app.tasks.jobs"],
)

celery.conf.update(
    timezone="UTC",
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    result_expires=24 * 3600,
)

celery.conf.beat_schedule = {
    # passive TTL for refresh_tokens; the request path only flags expired rows
    "purge-expired-refresh-tokens": {
        "task": "app.tasks.jobs.purge_expired_refresh_tokens",
        "schedule": crontab(minute=0),
    },
    # stays that checked out yesterday become reviewable
    "complete-past-bookings": {
        "task": "app.tasks.jobs.complete_past_bookings",
        "schedule": crontab(hour=0, minute=15),
    },
}


@worker_ready.connect
def sweep_on_start(sender, **kwargs):
    from app.tasks.jobs import purge_expired_refresh_tokens
    purge_expired_refresh_tokens.delay()
