"""
Post-commit notification hand-off.
"""

import logging

from src.core.interfaces.notification_service import (
    INotificationDispatcher,
    VerificationNotification,
)

logger = logging.getLogger(__name__)


def notify_after_commit(
    dispatcher: INotificationDispatcher | None,
    notification: VerificationNotification,
) -> None:
    """Hand the notification to the dispatcher; never raises."""
    if dispatcher is None:
        return
    try:
        dispatcher.dispatch(notification)
    except Exception:
        logger.exception(
            f"Could not dispatch {notification.event.value} notification for user {notification.user_id}"
        )
