"""
Celery tasks package.

- notification_tasks: new application notification emails
"""

from recruiting.tasks import notification_tasks

__all__ = ["notification_tasks"]
