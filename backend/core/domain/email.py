"""
core.domain.email — Best-effort outbound email for case decisions.

Wraps ``django.core.mail`` so the transport is whatever
``settings.EMAIL_BACKEND`` points at (SMTP in production, the locmem
backend under test).  Every delivery error is converted into
``SideEffectFailure``; callers (the notification fan-out) catch it, log
it and carry on.
"""

from __future__ import annotations

import logging
import smtplib
from email.utils import make_msgid

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.utils.html import format_html

from core.domain.exceptions import SideEffectFailure

logger = logging.getLogger(__name__)


class EmailDispatcher:
    """
    Stateless sender.  ``send`` returns the Message-ID of the delivered
    email or raises ``SideEffectFailure``.
    """

    @staticmethod
    def send(*, to: str, subject: str, text: str, html: str | None = None) -> str:
        """
        Deliver one email to one address.

        Args:
            to:      Recipient address.
            subject: Subject line (the configured prefix is prepended).
            text:    Plain-text body.
            html:    Optional HTML alternative; falls back to ``text``.

        Returns:
            The ``Message-ID`` header value of the sent email.

        Raises:
            SideEffectFailure: On any transport error, or if the backend
                reports that nothing was sent.
        """
        message_id = make_msgid(domain=settings.EMAIL_MESSAGE_ID_DOMAIN)
        # Header values may not contain line breaks.
        subject = " ".join(f"{settings.CASE_EMAIL_SUBJECT_PREFIX}{subject}".split())
        email = EmailMultiAlternatives(
            subject=subject,
            body=text,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[to],
            headers={"Message-ID": message_id},
        )
        email.attach_alternative(html or text, "text/html")

        # BadHeaderError (bad recipient or header) is a ValueError.
        try:
            sent = email.send(fail_silently=False)
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            raise SideEffectFailure(
                f"Email to {to} failed: {exc}",
                effect="email",
            ) from exc

        if not sent:
            raise SideEffectFailure(f"Email to {to} was not accepted.", effect="email")

        logger.info("Email sent to %s (%s)", to, message_id)
        return message_id

    @classmethod
    def send_case_approved(cls, *, to: str, case_title: str, pnr: str, hearing_date: str) -> str:
        subject = f"Case Approved - {case_title}"
        text = (
            f'Your case "{case_title}" has been approved. '
            f"PNR: {pnr}. Hearing Date: {hearing_date}"
        )
        html = format_html(
            "<h2>Case Approved</h2>"
            "<p>The case <strong>{}</strong> has been approved by the police department.</p>"
            "<p>PNR: <strong>{}</strong><br>Hearing date: <strong>{}</strong></p>",
            case_title,
            pnr,
            hearing_date,
        )
        return cls.send(to=to, subject=subject, text=text, html=html)

    @classmethod
    def send_case_rejected(cls, *, to: str, case_title: str, reason: str = "") -> str:
        subject = f"Case Rejected - {case_title}"
        text = f'Your case "{case_title}" has been rejected.'
        if reason:
            text += f" Reason: {reason}"
        html = format_html(
            "<h2>Case Rejected</h2><p>The case <strong>{}</strong> has been rejected.</p>{}",
            case_title,
            format_html("<p><strong>Reason:</strong> {}</p>", reason) if reason else "",
        )
        return cls.send(to=to, subject=subject, text=text, html=html)
