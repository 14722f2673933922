"""
Celery tasks package initialization.
"""
from app.tasks.scheduled_tasks import *
