"""Refresh completion summary email via the Resend HTTP API."""

import logging
from html import escape

import httpx

from marquee.etl.errors import NotifierError
from marquee.etl.types import RefreshSummary
from marquee.settings import NotifySettings, settings

logger = logging.getLogger(__name__)


def build_summary_email(
    summary: RefreshSummary,
    success: bool,
    error_message: str | None = None,
) -> tuple[str, str]:
    """Build subject and HTML body of the summary email.

    Args:
        summary: Run summary.
        success: Whether the run completed.
        error_message: Top-level failure, if any.

    Returns:
        (subject, html) tuple.
    """
    subject = (
        "Marquee catalog refresh succeeded" if success else "Marquee catalog refresh failed"
    )
    rows = [
        ("Listed", summary.listed),
        ("Processed", summary.processed),
        ("Skipped", summary.skipped),
        ("Failed", summary.failed),
        ("Notifications", summary.notifications),
        ("Duration", f"{summary.duration_seconds:.1f}s"),
    ]
    html = "<h2>{}</h2><table>{}</table>".format(
        escape(subject),
        "".join(f"<tr><td>{label}</td><td>{value}</td></tr>" for label, value in rows),
    )
    if error_message:
        html += f"<p><strong>Error:</strong> {escape(error_message)}</p>"
    return subject, html


class SummaryMailer:
    """Sends run summaries when RESEND_API_KEY and SUMMARY_TO are set."""

    def __init__(
        self,
        config: NotifySettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize mailer.

        Args:
            config: Notify settings (defaults to global settings).
            transport: Optional httpx transport (tests).
        """
        self._config = config or settings.notify
        self._transport = transport

    @property
    def configured(self) -> bool:
        """Whether summaries are sent."""
        return self._config.summary_configured

    async def send(
        self,
        summary: RefreshSummary,
        success: bool,
        error_message: str | None = None,
    ) -> bool:
        """Send the summary email.

        Args:
            summary: Run summary.
            success: Whether the run completed.
            error_message: Top-level failure, if any.

        Returns:
            True if an email was sent, False when unconfigured.

        Raises:
            NotifierError: When the email API fails.
        """
        if not self.configured:
            logger.debug("Summary email not configured, skipping")
            return False

        subject, html = build_summary_email(summary, success, error_message)
        body = {
            "from": self._config.summary_from,
            "to": [self._config.summary_to],
            "subject": subject,
            "html": html,
        }

        async with httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(
                    f"{self._config.resend_base_url.rstrip('/')}/emails",
                    json=body,
                    headers={"Authorization": f"Bearer {self._config.resend_api_key}"},
                )
            except httpx.HTTPError as e:
                raise NotifierError(f"Summary email failed: {e}") from e

        if response.is_error:
            raise NotifierError(f"Summary email rejected: {response.status_code}")
        return True
