"""Outbound notification settings.

Alert webhook and completion-summary email configuration.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NotifySettings(BaseSettings):
    """Notifier and run summary configuration.

    Attributes:
        notifier_url: Webhook receiving alert payloads.
        notifier_token: Bearer token sent to the webhook.
        timeout_seconds: HTTP timeout for outbound calls.
        resend_api_key: Resend API key for summary emails.
        resend_base_url: Resend API base URL.
        summary_from: Sender of the summary email.
        summary_to: Recipient of the summary email.
    """

    notifier_url: str = Field(default="", alias="NOTIFIER_URL")
    notifier_token: str = Field(default="", alias="NOTIFIER_TOKEN")
    timeout_seconds: float = Field(default=10.0, alias="NOTIFIER_TIMEOUT")

    resend_api_key: str = Field(default="", alias="RESEND_API_KEY")
    resend_base_url: str = Field(default="https://api.resend.com", alias="RESEND_BASE_URL")
    summary_from: str = Field(default="Marquee Cron <cron@marquee.local>", alias="SUMMARY_FROM")
    summary_to: str = Field(default="", alias="SUMMARY_TO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def notifier_configured(self) -> bool:
        """Check if the alert webhook is configured."""
        return bool(self.notifier_url)

    @property
    def summary_configured(self) -> bool:
        """Check if summary emails can be sent."""
        return bool(self.resend_api_key and self.summary_to)
