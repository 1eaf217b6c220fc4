"""
Celery tasks for blog_api.

The host project owns the Celery app; these are shared tasks and bind to it.
"""
import logging

from celery import shared_task
from django.core.mail import mail_admins

logger = logging.getLogger(__name__)


@shared_task
def send_signup_alert(subject, message):
    """Mail the site admins. Failures are logged, never retried."""
    try:
        mail_admins(subject, message, fail_silently=False)
    except Exception:
        logger.exception("Signup notification failed")
        return False
    logger.info("Signup notification sent")
    return True
