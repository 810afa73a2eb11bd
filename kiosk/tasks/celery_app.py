from celery import Celery

from kiosk.config import get_settings

settings = get_settings()

# Only the order history is written in the background
celery_app = Celery(
    "kiosk",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["kiosk.tasks.order_tasks"]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Order rows go to their own queue so a backlog is easy to spot
    task_default_queue="order_log",
    task_time_limit=30,
    result_expires=3600,

    # Tests and single-process deployments record orders inline
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_eager_propagates=False,

    # A row is only acknowledged once it is committed
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
)
