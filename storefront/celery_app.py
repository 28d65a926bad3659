"""Celery application for background storefront jobs"""

from celery import Celery
from kombu import Queue

from .core.config import settings

EMAIL_QUEUE = "emails"

celery_app = Celery(
    "storefront",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["storefront.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=15 * 60,
    task_default_queue="default",
    task_queues=(Queue("default"), Queue(EMAIL_QUEUE)),
    task_routes={
        "storefront.tasks.send_order_confirmation_email": {"queue": EMAIL_QUEUE},
    },
    # hung SMTP servers
    task_soft_time_limit=60,
    task_time_limit=90,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    broker_connection_retry_on_startup=True,
    # Tests run tasks inline without a broker
    task_always_eager=settings.TESTING,
    task_eager_propagates=settings.TESTING,
    task_store_eager_result=False,
)
