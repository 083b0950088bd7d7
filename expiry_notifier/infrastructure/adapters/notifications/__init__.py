"""Alert dispatcher adapter implementations."""

from .base import BaseAlertDispatcher
from .email import EmailAlertDispatcher, EmailConfig
from .graph_email import GraphEmailAlertDispatcher, GraphEmailConfig
from .slack import SlackAlertDispatcher, SlackConfig
from .webhook import WebhookAlertDispatcher, WebhookConfig

__all__ = [
    "BaseAlertDispatcher",
    "EmailAlertDispatcher",
    "EmailConfig",
    "GraphEmailAlertDispatcher",
    "GraphEmailConfig",
    "SlackAlertDispatcher",
    "SlackConfig",
    "WebhookAlertDispatcher",
    "WebhookConfig",
]
