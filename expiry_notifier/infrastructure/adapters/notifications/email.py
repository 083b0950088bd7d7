"""Email alert dispatcher using SMTP."""

from __future__ import annotations

import asyncio
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import TYPE_CHECKING

from ....application.exceptions import DeliveryError
from .base import BaseAlertDispatcher

if TYPE_CHECKING:
    from ....domain.entities import ExpiryAlert


@dataclass(frozen=True, slots=True)
class EmailConfig:
    """Email alert configuration."""

    enabled: bool = False
    server: str = ""
    port: int = 587
    username: str = ""
    password: str = ""
    from_address: str = ""
    to_addresses: str = ""  # Comma-separated
    use_tls: bool = True
    timeout: float = 30.0


class EmailAlertDispatcher(BaseAlertDispatcher):
    """Send alerts via SMTP email."""

    channel = "Email"

    def __init__(self, config: EmailConfig) -> None:
        """Initialize the email dispatcher."""
        super().__init__()
        self._config = config

    def is_configured(self) -> bool:
        """Check if email is properly configured."""
        return (
            self._config.enabled
            and bool(self._config.server)
            and bool(self._config.from_address)
            and bool(self._config.to_addresses)
        )

    async def send(self, alert: ExpiryAlert) -> None:
        """Send one email for the alert."""
        self._require_configured()

        msg = self._build_message(alert)
        recipients = self.split_addresses(self._config.to_addresses)

        try:
            await asyncio.to_thread(self._deliver, recipients, msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            msg_text = f"Failed to send email: {e}"
            raise DeliveryError(msg_text) from e

        self._logger.info("Email notification sent: %s", alert.message)

    def _deliver(self, recipients: list[str], body: str) -> None:
        """Blocking SMTP exchange, run on a worker thread."""
        with smtplib.SMTP(self._config.server, self._config.port, timeout=self._config.timeout) as server:
            if self._config.use_tls:
                server.starttls()
            if self._config.username and self._config.password:
                server.login(self._config.username, self._config.password)
            server.sendmail(self._config.from_address, recipients, body)

    def _build_message(self, alert: ExpiryAlert) -> MIMEMultipart:
        """Build the email message."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = alert.subject
        msg["From"] = self._config.from_address
        msg["To"] = self._config.to_addresses

        msg.attach(MIMEText(self._format_text_body(alert), "plain", "utf-8"))
        msg.attach(MIMEText(self._format_html_body(alert), "html", "utf-8"))

        return msg

    def _format_text_body(self, alert: ExpiryAlert) -> str:
        """Format plain text email body."""
        lines = [alert.message, ""]
        lines.extend(f"{label}: {value}" for label, value in self.format_details(alert))
        lines.extend(["", "-" * 40, "Expiry Notifier"])
        return "\n".join(lines)

    def _format_html_body(self, alert: ExpiryAlert) -> str:
        """Format HTML email body."""
        rows = "".join(
            f"<tr><th>{escape(label)}</th><td>{escape(value)}</td></tr>\n"
            for label, value in self.format_details(alert)
        )
        return f"""<!DOCTYPE html>
<html>
<head>
<style>
body {{ font-family: Arial, sans-serif; margin: 20px; }}
.header {{ background-color: #dc3545; color: white; padding: 15px; border-radius: 5px; }}
table {{ border-collapse: collapse; margin: 15px 0; }}
th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
th {{ background-color: #f8f9fa; }}
.footer {{ margin-top: 20px; font-size: 12px; color: #6c757d; }}
</style>
</head>
<body>
<div class="header"><h1>{escape(alert.subject)}</h1></div>
<p>{escape(alert.message)}</p>
<table>
{rows}</table>
<div class="footer"><p>Expiry Notifier</p></div>
</body>
</html>"""
