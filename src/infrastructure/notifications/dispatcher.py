"""
Adapter: Background Notification Dispatcher

Renders verification emails and sends them on a small thread pool so the
request never waits for the mail server. Failures end up in the log.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from src.core.interfaces.notification_service import (
    IEmailSender,
    INotificationDispatcher,
    VerificationNotification,
)
from src.infrastructure.notifications.email_templates import render

logger = logging.getLogger(__name__)


class BackgroundEmailDispatcher(INotificationDispatcher):

    def __init__(self, sender: IEmailSender, brand_name: str, max_workers: int = 2):
        self._sender = sender
        self._brand = brand_name
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notify")

    def dispatch(self, notification: VerificationNotification) -> Future:
        return self._executor.submit(self._deliver, notification)

    def _deliver(self, notification: VerificationNotification) -> bool:
        try:
            return self._sender.send(render(notification, self._brand))
        except Exception:
            logger.exception(
                f"Failed to send {notification.event.value} notification to user {notification.user_id}"
            )
            return False

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)
