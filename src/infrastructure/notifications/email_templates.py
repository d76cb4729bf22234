"""
Verification email templates (subject, plain text, HTML).
"""

from html import escape

from src.core.interfaces.notification_service import (
    EmailMessage,
    NotificationEvent,
    VerificationNotification,
)


def _submitted(name: str, brand: str, reason: str | None) -> tuple[str, str, str]:
    subject = f"Verification documents received - {brand}"
    text = (
        f"Hi {name},\n\n"
        "We have received your identity verification documents. Our team will review them "
        "within the next 24-48 hours.\n\n"
        "We will email you as soon as the verification is complete.\n\n"
        f"Thanks,\nThe {brand} team"
    )
    html = (
        "<h2>Documents received</h2>"
        f"<p>Hi {escape(name)},</p>"
        "<p>We have received your identity verification documents. Our team will review them "
        "within the next <strong>24-48 hours</strong>.</p>"
        "<p>We will email you as soon as the verification is complete.</p>"
        f"<p>Thanks,<br>The {escape(brand)} team</p>"
    )
    return subject, text, html


def _approved(name: str, brand: str, reason: str | None) -> tuple[str, str, str]:
    subject = f"Verification approved! - {brand}"
    text = (
        f"Congratulations {name}!\n\n"
        "Your identity has been verified. You now get:\n\n"
        "- A verified badge on your profile\n"
        "- Better visibility in search results\n"
        "- More trust from clients\n\n"
        f"The {brand} team"
    )
    html = (
        "<h2>Verification approved!</h2>"
        f"<p>Congratulations {escape(name)}!</p>"
        "<p>Your identity has been verified. You now get:</p>"
        "<ul>"
        "<li>A verified badge on your profile</li>"
        "<li>Better visibility in search results</li>"
        "<li>More trust from clients</li>"
        "</ul>"
        f"<p>The {escape(brand)} team</p>"
    )
    return subject, text, html


def _rejected(name: str, brand: str, reason: str | None) -> tuple[str, str, str]:
    reason = reason or "not specified"
    subject = f"Your verification needs attention - {brand}"
    text = (
        f"Hi {name},\n\n"
        "We reviewed your verification documents but need you to check a few details.\n\n"
        f"Reason: {reason}\n\n"
        "You can submit your documents again from your profile.\n"
        "If you have questions, contact our support team.\n\n"
        f"The {brand} team"
    )
    html = (
        "<h2>Your verification needs attention</h2>"
        f"<p>Hi {escape(name)},</p>"
        "<p>We reviewed your verification documents but need you to check a few details.</p>"
        f"<p><strong>Reason:</strong> {escape(reason)}</p>"
        "<p>You can submit your documents again from your profile.</p>"
        "<p>If you have questions, contact our support team.</p>"
        f"<p>The {escape(brand)} team</p>"
    )
    return subject, text, html


TEMPLATES = {
    NotificationEvent.SUBMITTED: _submitted,
    NotificationEvent.APPROVED: _approved,
    NotificationEvent.REJECTED: _rejected,
}


def render(notification: VerificationNotification, brand: str) -> EmailMessage:
    name = notification.full_name or notification.email
    subject, text, html = TEMPLATES[notification.event](name, brand, notification.rejection_reason)
    return EmailMessage(to=notification.email, subject=subject, text=text, html=html)
