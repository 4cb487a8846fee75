"""
Registration confirmations.

Two pieces live here:

* ``EmailNotifier`` builds a confirmation email and sends it over SMTP.
  It reports success as a boolean and never raises for delivery
  problems.
* ``NotificationDispatcher`` runs notifier calls on a dedicated thread
  pool.  Callers hand work over and return immediately; whatever
  happens during the send (a ``False`` result or an exception) is
  logged here and goes no further.

Sending email is not part of a registration's outcome: the registration
service dispatches the confirmation only after it has committed the
participant and released the event lock.
"""

import html
import logging
import smtplib
import ssl
from concurrent.futures import Future, ThreadPoolExecutor
from email.message import EmailMessage
from typing import Callable, Optional, Protocol

from ..core.config import Settings

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send_registration_email(self, email: str, name: str, event_title: str) -> bool:
        ...


def build_registration_message(sender: str, email: str, name: str, event_title: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = email
    msg["Subject"] = f"Registration Confirmed: {event_title}"
    msg.set_content(
        f"Hello {name},\n\n"
        f"You have successfully registered for {event_title}.\n"
        "We look forward to seeing you at the event!\n\n"
        "Best regards,\n"
        "Virtual Event Management Platform\n"
    )
    msg.add_alternative(
        "<h2>Event Registration Confirmation</h2>"
        f"<p>Hello <strong>{html.escape(name)}</strong>,</p>"
        f"<p>You have successfully registered for <strong>{html.escape(event_title)}</strong>.</p>"
        "<p>We look forward to seeing you at the event!</p>"
        "<br/><p>Best regards,</p><p>Virtual Event Management Platform</p>",
        subtype="html",
    )
    return msg


class EmailNotifier:
    """Send registration confirmations through an SMTP relay."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def send_registration_email(self, email: str, name: str, event_title: str) -> bool:
        if not self._settings.email_host:
            logger.info("EMAIL_HOST not configured; skipping confirmation for %s", email)
            return False
        msg = build_registration_message(self._settings.email_from, email, name, event_title)
        try:
            self._send(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", email, exc)
            return False
        logger.info("Registration email sent to %s", email)
        return True

    def _send(self, msg: EmailMessage) -> None:
        """Blocking SMTP send."""
        cfg = self._settings
        with smtplib.SMTP(cfg.email_host, cfg.email_port, timeout=cfg.email_timeout) as server:
            if cfg.email_use_tls:
                server.starttls(context=ssl.create_default_context())
            if cfg.email_user:
                server.login(cfg.email_user, cfg.email_password)
            server.send_message(msg)


class NotificationDispatcher:
    """Fire-and-forget execution of notifier calls on a worker pool."""

    def __init__(self, max_workers: int = 2) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notification")

    def dispatch(self, send: Callable[..., bool], *args) -> Optional[Future]:
        """Schedule ``send(*args)`` and return without waiting for it."""
        try:
            return self._executor.submit(self._run, send, *args)
        except RuntimeError as exc:
            # Raised by ``submit`` once the pool has been shut down.
            logger.warning("Notification dropped: %s", exc)
            return None

    @staticmethod
    def _run(send: Callable[..., bool], *args) -> bool:
        name = getattr(send, "__name__", repr(send))
        try:
            delivered = bool(send(*args))
        except Exception:
            logger.exception("Notification %s raised", name)
            return False
        if not delivered:
            logger.warning("Notification %s was not delivered", name)
        return delivered

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; with ``wait`` block until queued sends finish."""
        self._executor.shutdown(wait=wait)
