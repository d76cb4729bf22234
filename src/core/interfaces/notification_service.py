"""
Contract: Notification Service

Best-effort notification of verification state changes. Delivery runs
outside the request and outside the database transaction; a failure is
reported on the dispatcher's own channel (logs) and never reaches the
caller.
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum


class NotificationEvent(str, Enum):
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class VerificationNotification:
    """Everything needed to notify a user, captured before commit."""
    event: NotificationEvent
    user_id: str
    email: str
    full_name: str
    rejection_reason: str | None = None


@dataclass
class EmailMessage:
    to: str
    subject: str
    text: str
    html: str


class IEmailSender(ABC):
    """Port: outgoing email. No delivery guarantee is required."""

    @abstractmethod
    def send(self, message: EmailMessage) -> bool:
        """
        Send one message.

        Returns:
            True when handed to the mail server, False when skipped.
        """
        ...


class INotificationDispatcher(ABC):
    """Port: fire-and-forget dispatch of verification notifications."""

    @abstractmethod
    def dispatch(self, notification: VerificationNotification) -> Future | None:
        """
        Schedule delivery without waiting for it.

        Returns:
            A future resolving to whether the message went out, or None
            when nothing was scheduled.
        """
        ...
