"""Item kind value object."""

from enum import StrEnum


class ItemKind(StrEnum):
    """Kind of trackable item."""

    DOMAIN = "domain"
    SSL = "ssl"

    def __str__(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Human-readable label used in reminder messages."""
        match self:
            case ItemKind.DOMAIN:
                return "Domain"
            case ItemKind.SSL:
                return "SSL certificate"
