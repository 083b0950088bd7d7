"""Email alert dispatcher using Microsoft Graph API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from html import escape
from typing import Any

import httpx
import msal

from ....application.exceptions import DeliveryError
from ....domain.entities import ExpiryAlert
from .base import BaseAlertDispatcher


@dataclass(frozen=True, slots=True)
class GraphEmailConfig:
    """Microsoft Graph email alert configuration."""

    enabled: bool = False
    tenant_id: str = ""
    client_id: str = ""
    client_secret: str = ""
    from_address: str = ""  # Sender mailbox (app needs Mail.Send permission)
    to_addresses: str = ""  # Comma-separated recipients
    save_to_sent_items: bool = False


class GraphEmailAlertDispatcher(BaseAlertDispatcher):
    """Send alerts via Microsoft Graph API email."""

    channel = "Graph email"

    GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
    AUTHORITY_BASE = "https://login.microsoftonline.com"
    SCOPE = ["https://graph.microsoft.com/.default"]

    def __init__(self, config: GraphEmailConfig) -> None:
        """Initialize the Graph email dispatcher."""
        super().__init__()
        self._config = config
        self._access_token: str | None = None
        self._token_expiry: datetime | None = None
        self._msal_app: msal.ConfidentialClientApplication | None = None

    def is_configured(self) -> bool:
        """Check if Graph email is properly configured."""
        return (
            self._config.enabled
            and bool(self._config.tenant_id)
            and bool(self._config.client_id)
            and bool(self._config.client_secret)
            and bool(self._config.from_address)
            and bool(self._config.to_addresses)
        )

    def _get_msal_app(self) -> msal.ConfidentialClientApplication:
        """Get or create MSAL application instance."""
        if self._msal_app is None:
            authority = f"{self.AUTHORITY_BASE}/{self._config.tenant_id}"
            self._msal_app = msal.ConfidentialClientApplication(
                client_id=self._config.client_id,
                client_credential=self._config.client_secret,
                authority=authority,
            )
        return self._msal_app

    async def _acquire_token(self) -> str:
        """Acquire access token using client credentials flow."""
        if self._access_token and self._token_expiry:
            if datetime.now(UTC) < self._token_expiry:
                return self._access_token

        app = self._get_msal_app()
        result = await asyncio.to_thread(app.acquire_token_for_client, scopes=self.SCOPE)

        if "access_token" not in result:
            error = result.get("error_description", result.get("error", "Unknown error"))
            msg = f"Failed to acquire access token: {error}"
            raise DeliveryError(msg)

        self._access_token = result["access_token"]
        expires_in = result.get("expires_in", 3600)
        self._token_expiry = datetime.now(UTC) + timedelta(seconds=expires_in - 300)

        return self._access_token

    async def send(self, alert: ExpiryAlert) -> None:
        """Send one email via Graph API."""
        self._require_configured()

        token = await self._acquire_token()
        url = f"{self.GRAPH_BASE_URL}/users/{self._config.from_address}/sendMail"
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.post(url, headers=headers, json=self._build_message(alert))
                response.raise_for_status()
        except httpx.HTTPError as e:
            msg = f"Failed to send Graph email: {e}"
            raise DeliveryError(msg) from e

        self._logger.info("Graph email sent to %s", self._config.to_addresses)

    def _build_message(self, alert: ExpiryAlert) -> dict[str, Any]:
        """Build the Graph API email message payload."""
        recipients = [
            {"emailAddress": {"address": addr}}
            for addr in self.split_addresses(self._config.to_addresses)
        ]

        return {
            "message": {
                "subject": alert.subject,
                "body": {
                    "contentType": "HTML",
                    "content": self._format_html_body(alert),
                },
                "toRecipients": recipients,
            },
            "saveToSentItems": self._config.save_to_sent_items,
        }

    def _format_html_body(self, alert: ExpiryAlert) -> str:
        """Format HTML email body."""
        rows = "".join(
            f"<tr><th>{escape(label)}</th><td>{escape(value)}</td></tr>"
            for label, value in self.format_details(alert)
        )
        return (
            f"<html><body style=\"font-family: Arial, sans-serif;\">"
            f"<h2>{escape(alert.subject)}</h2>"
            f"<p>{escape(alert.message)}</p>"
            f"<table border=\"1\" cellpadding=\"6\" style=\"border-collapse: collapse;\">{rows}</table>"
            f"<p style=\"font-size: 12px; color: #6c757d;\">Expiry Notifier</p>"
            f"</body></html>"
        )
