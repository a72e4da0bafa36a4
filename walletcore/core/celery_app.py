"""Celery application for post-commit notifications.

The ledger only ever enqueues here; it never waits on a result. Workers
are started with ``celery -A walletcore.core.celery_app worker``.
"""

from celery import Celery
from celery.signals import setup_logging

from walletcore.core.config import Settings, get_settings
from walletcore.core.logging_config import configure_logging

NOTIFICATION_QUEUE = "notifications"


def create_celery_app(settings: Settings) -> Celery:
    """Build a Celery app wired to the Redis broker named in ``settings``."""
    app = Celery(
        "walletcore_worker",
        broker=settings.celery_broker_url,
        backend=settings.celery_result_backend,
        include=["walletcore.worker"],
    )
    app.conf.update(
        # Task arguments are plain JSON: ids, emails and minor-unit integers
        task_serializer="json",
        result_serializer="json",
        accept_content=["json"],

        timezone="UTC",
        enable_utc=True,

        task_default_queue=NOTIFICATION_QUEUE,
        task_track_started=True,
        task_time_limit=300,  # 5 minutes max per task
        result_expires=3600,  # Results expire after 1 hour

        # Run tasks inline (tests, single-process deployments without a broker)
        task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    )
    return app


@setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    configure_logging(get_settings().LOG_LEVEL)


celery_app = create_celery_app(get_settings())
