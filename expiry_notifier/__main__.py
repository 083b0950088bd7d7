"""Allow ``python -m expiry_notifier``."""

from .main import main

main()
