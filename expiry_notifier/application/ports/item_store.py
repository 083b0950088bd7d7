"""Port for the item store - driven/secondary port."""

from datetime import datetime
from typing import Protocol

from ...domain.entities import Domain, SslCertificate, TrackableItem
from ...domain.value_objects import ItemKind


class ItemStore(Protocol):
    """
    Port for reading and updating trackable items.

    Implementations own Domains and SSL Certificates. The scan only reads the
    active ones and writes back bookkeeping fields.
    """

    async def list_active_domains(self) -> list[Domain]:
        """
        Retrieve domains that are not marked completed.

        Raises:
            StoreError: If retrieval fails.
        """
        ...

    async def list_active_ssl_certificates(self) -> list[SslCertificate]:
        """
        Retrieve SSL certificates that are not marked completed.

        Raises:
            StoreError: If retrieval fails.
        """
        ...

    async def set_next_notification_date(
        self, kind: ItemKind, item_id: str, when: datetime | None
    ) -> None:
        """
        Record when the item's next reminder is due.

        Raises:
            ItemNotFoundError: If the item does not exist.
            StoreError: If the update fails.
        """
        ...

    async def mark_completed(self, kind: ItemKind, item_id: str) -> TrackableItem:
        """
        Mark an item's renewal as handled so it stops receiving reminders.

        Raises:
            ItemNotFoundError: If the item does not exist.
            StoreError: If the update fails.
        """
        ...
