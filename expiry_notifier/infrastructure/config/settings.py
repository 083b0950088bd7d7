"""Application settings loaded from environment variables."""

import os
from dataclasses import dataclass, field
from functools import cached_property
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from croniter import croniter

from ..adapters.notifications.email import EmailConfig
from ..adapters.notifications.graph_email import GraphEmailConfig
from ..adapters.notifications.slack import SlackConfig
from ..adapters.notifications.webhook import WebhookConfig

RUN_MODES = ("once", "scheduled")


def _env_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    return os.environ.get(key, str(default)).lower() in ("true", "1", "yes")


def _env_int(key: str, default: int) -> int:
    """Get integer from environment variable."""
    return int(os.environ.get(key, str(default)))


def _env_str(key: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default)


@dataclass
class Settings:
    """Application settings container."""

    # Storage
    database_url: str = field(default_factory=lambda: _env_str("DATABASE_URL", "sqlite:///expiry_notifier.db"))

    # Scan behaviour
    scan_timezone: str = field(default_factory=lambda: _env_str("SCAN_TIMEZONE", "UTC"))
    catch_up_days: int = field(default_factory=lambda: _env_int("CATCH_UP_DAYS", 0))
    skip_completed: bool = field(default_factory=lambda: _env_bool("SKIP_COMPLETED", default=True))
    scan_timeout_seconds: int = field(default_factory=lambda: _env_int("SCAN_TIMEOUT_SECONDS", 0))

    # Run configuration
    run_mode: str = field(default_factory=lambda: _env_str("RUN_MODE", "once"))
    cron_schedule: str = field(default_factory=lambda: _env_str("CRON_SCHEDULE", "0 8 * * *"))
    log_level: str = field(default_factory=lambda: _env_str("LOG_LEVEL", "INFO"))
    dry_run: bool = field(default_factory=lambda: _env_bool("DRY_RUN"))

    # Email settings
    smtp_enabled: bool = field(default_factory=lambda: _env_bool("SMTP_ENABLED"))
    smtp_server: str = field(default_factory=lambda: _env_str("SMTP_SERVER"))
    smtp_port: int = field(default_factory=lambda: _env_int("SMTP_PORT", 587))
    smtp_username: str = field(default_factory=lambda: _env_str("SMTP_USERNAME"))
    smtp_password: str = field(default_factory=lambda: _env_str("SMTP_PASSWORD"))
    smtp_from: str = field(default_factory=lambda: _env_str("SMTP_FROM"))
    smtp_to: str = field(default_factory=lambda: _env_str("SMTP_TO"))
    smtp_use_tls: bool = field(default_factory=lambda: _env_bool("SMTP_USE_TLS", default=True))

    # Slack settings
    slack_enabled: bool = field(default_factory=lambda: _env_bool("SLACK_ENABLED"))
    slack_webhook_url: str = field(default_factory=lambda: _env_str("SLACK_WEBHOOK_URL"))

    # Webhook settings
    webhook_enabled: bool = field(default_factory=lambda: _env_bool("WEBHOOK_ENABLED"))
    webhook_url: str = field(default_factory=lambda: _env_str("WEBHOOK_URL"))

    # Graph email settings (MS Graph API)
    graph_email_enabled: bool = field(default_factory=lambda: _env_bool("GRAPH_EMAIL_ENABLED"))
    graph_email_tenant_id: str = field(default_factory=lambda: _env_str("GRAPH_EMAIL_TENANT_ID"))
    graph_email_client_id: str = field(default_factory=lambda: _env_str("GRAPH_EMAIL_CLIENT_ID"))
    graph_email_client_secret: str = field(default_factory=lambda: _env_str("GRAPH_EMAIL_CLIENT_SECRET"))
    graph_email_from: str = field(default_factory=lambda: _env_str("GRAPH_EMAIL_FROM"))
    graph_email_to: str = field(default_factory=lambda: _env_str("GRAPH_EMAIL_TO"))
    graph_email_save_to_sent: bool = field(default_factory=lambda: _env_bool("GRAPH_EMAIL_SAVE_TO_SENT"))

    def validate(self) -> None:
        """Validate settings."""
        errors: list[str] = []

        if not self.database_url:
            errors.append("DATABASE_URL must be set")
        if self.run_mode.lower() not in RUN_MODES:
            errors.append(f"RUN_MODE must be one of {', '.join(RUN_MODES)}, got {self.run_mode!r}")
        if not croniter.is_valid(self.cron_schedule):
            errors.append(f"CRON_SCHEDULE is not a valid cron expression: {self.cron_schedule!r}")
        if self.catch_up_days < 0:
            errors.append(f"CATCH_UP_DAYS must be >= 0, got {self.catch_up_days}")
        if self.scan_timeout_seconds < 0:
            errors.append(f"SCAN_TIMEOUT_SECONDS must be >= 0, got {self.scan_timeout_seconds}")
        try:
            ZoneInfo(self.scan_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(f"SCAN_TIMEZONE is not a known timezone: {self.scan_timezone!r}")

        if errors:
            msg = "; ".join(errors)
            raise ValueError(msg)

    @cached_property
    def timezone(self) -> ZoneInfo:
        """Zone that defines the calendar day of a scan."""
        return ZoneInfo(self.scan_timezone)

    @cached_property
    def email_config(self) -> EmailConfig:
        """Get email configuration."""
        return EmailConfig(
            enabled=self.smtp_enabled,
            server=self.smtp_server,
            port=self.smtp_port,
            username=self.smtp_username,
            password=self.smtp_password,
            from_address=self.smtp_from,
            to_addresses=self.smtp_to,
            use_tls=self.smtp_use_tls,
        )

    @cached_property
    def slack_config(self) -> SlackConfig:
        """Get Slack configuration."""
        return SlackConfig(
            enabled=self.slack_enabled,
            webhook_url=self.slack_webhook_url,
        )

    @cached_property
    def webhook_config(self) -> WebhookConfig:
        """Get webhook configuration."""
        return WebhookConfig(
            enabled=self.webhook_enabled,
            url=self.webhook_url,
        )

    @cached_property
    def graph_email_config(self) -> GraphEmailConfig:
        """Get Graph email configuration."""
        return GraphEmailConfig(
            enabled=self.graph_email_enabled,
            tenant_id=self.graph_email_tenant_id,
            client_id=self.graph_email_client_id,
            client_secret=self.graph_email_client_secret,
            from_address=self.graph_email_from,
            to_addresses=self.graph_email_to,
            save_to_sent_items=self.graph_email_save_to_sent,
        )


def load_settings() -> Settings:
    """Load and validate settings from environment."""
    settings = Settings()
    settings.validate()
    return settings
