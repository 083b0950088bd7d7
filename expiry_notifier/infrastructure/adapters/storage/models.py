"""SQLAlchemy models for trackable items and notifications."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import DeclarativeBase, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class UtcDateTime(TypeDecorator):
    """Timezone-aware datetime stored as UTC, read back as UTC on every backend.

    SQLite keeps no offset, so values are normalized before binding.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class Base(DeclarativeBase):
    pass


class RegistrarRecord(Base):
    __tablename__ = "registrars"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    login_url = Column(Text, nullable=True)
    login_username = Column(Text, nullable=True)
    login_password = Column(Text, nullable=True)
    two_factor_mobile = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(UtcDateTime(timezone=True), default=_utcnow, nullable=False)

    domains = relationship("DomainRecord", back_populates="registrar")


class DomainRecord(Base):
    __tablename__ = "domains"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    registrar_id = Column(String(36), ForeignKey("registrars.id"), nullable=False)
    expiry_date = Column(UtcDateTime(timezone=True), nullable=False)
    renewal_period_years = Column(Integer, default=1, nullable=False)
    auto_renewal = Column(Boolean, default=False, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(UtcDateTime(timezone=True), nullable=True)
    next_notification_date = Column(UtcDateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(UtcDateTime(timezone=True), default=_utcnow, nullable=False)

    registrar = relationship("RegistrarRecord", back_populates="domains", lazy="joined")

    __table_args__ = (
        Index("idx_domains_expiry", "expiry_date"),
        Index("idx_domains_completed", "is_completed"),
    )


class SslCertificateRecord(Base):
    __tablename__ = "ssl_certificates"

    id = Column(String(36), primary_key=True, default=_new_id)
    domain = Column(Text, nullable=False)
    issuer = Column(Text, nullable=False)
    expiry_date = Column(UtcDateTime(timezone=True), nullable=False)
    renewal_period_years = Column(Integer, default=1, nullable=False)
    auto_renewal = Column(Boolean, default=False, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(UtcDateTime(timezone=True), nullable=True)
    next_notification_date = Column(UtcDateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(UtcDateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index("idx_ssl_expiry", "expiry_date"),
        Index("idx_ssl_completed", "is_completed"),
    )


class NotificationRecord(Base):
    """Recorded milestone reminder; item_id is a plain reference, not a foreign key."""

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=_new_id)
    type = Column(String(10), nullable=False)  # domain / ssl
    item_id = Column(String(36), nullable=False, index=True)
    item_name = Column(Text, nullable=False)
    notification_type = Column(String(20), nullable=False)
    expiry_date = Column(UtcDateTime(timezone=True), nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    dedup_key = Column(String(100), nullable=False, unique=True)
    created_at = Column(UtcDateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index("idx_notifications_created", "created_at"),
        Index("idx_notifications_unread", "is_read"),
    )
