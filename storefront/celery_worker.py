# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# taski trzeba zaimportowac explicite, zeby worker je zarejestrowal
celery_app.conf.imports = (
    "storefront.services.sync_queue",
)

celery_app.conf.timezone = "UTC"
