"""Expiry Notifier - milestone reminders for domain and SSL certificate expiry."""

__version__ = "1.0.0"
