"""
Signup alerts for blog_api.

Registration hands the new user to SignupNotifier, which queues an alert to
the site admins (settings.ADMINS) once the registration transaction commits.
Delivery is best-effort: errors are logged and never reach the caller.
"""
import logging

from django.db import transaction

from .conf import blog_settings
from .tasks import send_signup_alert

logger = logging.getLogger(__name__)

SIGNUP_MESSAGE = """New User Registration Alert!

A new user has just signed up on BlogApp.

Email: {email}
Name: {name}

Keep an eye on new activity and ensure a warm onboarding experience!

- BlogApp Admin Notification
"""


class SignupNotifier:
    """
    Alert admins about new registrations.

    Args:
        send: callable(subject, message) delivering inline instead of
            queueing the send_signup_alert task
    """

    def __init__(self, send=None):
        self.send = send

    def build_message(self, user):
        return SIGNUP_MESSAGE.format(email=user.email, name=user.full_name)

    def notify_signup(self, user):
        """Schedule the alert for ``user`` to go out after commit."""
        subject = blog_settings.NOTIFY_SUBJECT
        message = self.build_message(user)
        transaction.on_commit(lambda: self.dispatch(subject, message))

    def dispatch(self, subject, message):
        if self.send is not None:
            return self.deliver(subject, message)
        try:
            send_signup_alert.delay(subject, message)
        except Exception:
            logger.exception("Could not queue signup notification")
            return False
        return True

    def deliver(self, subject, message):
        """Send one alert through ``send``. Returns True on success."""
        try:
            self.send(subject, message)
        except Exception:
            logger.exception("Signup notification failed")
            return False
        logger.info("Signup notification sent")
        return True
