"""Best-effort outbound email.

Callers hand messages to a :class:`Notifier` and move on. The
:class:`BestEffortNotifier` wrapper is the single error boundary: delivery
failures are logged and never reach the caller, and with an executor the
caller does not wait for SMTP at all.
"""

from __future__ import annotations

import logging
import smtplib
from concurrent.futures import Executor, ThreadPoolExecutor
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from blogpress.core.settings import Settings, settings

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Anything that can deliver an HTML email."""

    def send_email(self, to: str, subject: str, html_body: str) -> None: ...


class SmtpNotifier:
    """Deliver email through an SMTP relay."""

    def __init__(self, config: Settings) -> None:
        self.config = config

    def send_email(self, to: str, subject: str, html_body: str) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.config.mail_from
        msg["To"] = to
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        host = self.config.smtp_host
        if host is None:
            raise RuntimeError("SMTP_HOST is not configured")
        with smtplib.SMTP(host, self.config.smtp_port, timeout=self.config.smtp_timeout_seconds) as server:
            if self.config.smtp_use_tls:
                server.starttls()
            if self.config.smtp_username and self.config.smtp_password:
                server.login(self.config.smtp_username, self.config.smtp_password)
            server.sendmail(self.config.mail_from, [to], msg.as_string())
        logger.info("Email sent to %s - subject: %s", to, subject)


class LoggingNotifier:
    """Development notifier that writes messages to the log instead of sending."""

    def send_email(self, to: str, subject: str, html_body: str) -> None:
        logger.info("Email to %s - subject: %s\n%s", to, subject, html_body)


class BestEffortNotifier:
    """Wrap a notifier so that sending can never fail or block the caller."""

    def __init__(self, inner: Notifier, executor: Executor | None = None) -> None:
        self.inner = inner
        self.executor = executor

    def send_email(self, to: str, subject: str, html_body: str) -> None:
        if self.executor is None:
            self._deliver(to, subject, html_body)
            return
        try:
            self.executor.submit(self._deliver, to, subject, html_body)
        except RuntimeError:
            # Executor already shut down (application stopping).
            logger.warning("Email to %s dropped: dispatcher is shut down", to)

    def _deliver(self, to: str, subject: str, html_body: str) -> None:
        try:
            self.inner.send_email(to, subject, html_body)
        except Exception as exc:
            logger.error("Failed to send email to %s: %s", to, exc)
            logger.warning("Email delivery failed; stored state remains authoritative.")


_EXECUTOR: ThreadPoolExecutor | None = None
_NOTIFIER: BestEffortNotifier | None = None


def _build_notifier() -> BestEffortNotifier:
    global _EXECUTOR
    inner: Notifier = SmtpNotifier(settings) if settings.smtp_host else LoggingNotifier()
    _EXECUTOR = ThreadPoolExecutor(
        max_workers=max(1, settings.email_worker_threads),
        thread_name_prefix="blogpress-mail",
    )
    return BestEffortNotifier(inner, _EXECUTOR)


def get_notifier() -> Notifier:
    """Return the process-wide best-effort notifier."""
    global _NOTIFIER
    if _NOTIFIER is None:
        _NOTIFIER = _build_notifier()
    return _NOTIFIER


def shutdown_notifier() -> None:
    """Drain queued emails and release the dispatcher threads."""
    global _EXECUTOR, _NOTIFIER
    if _EXECUTOR is not None:
        _EXECUTOR.shutdown(wait=True)
    _EXECUTOR = None
    _NOTIFIER = None
