"""SQLAlchemy-backed item store and notification ledger.

Session work is blocking, so every adapter call runs it on a worker thread
with ``asyncio.to_thread``. Engines on a single shared connection (in-memory
SQLite with ``StaticPool``) are serialized with a lock.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager, nullcontext
from datetime import UTC, datetime
from typing import TypeVar
from weakref import WeakKeyDictionary

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ....application.exceptions import DuplicateNotificationError, StoreError
from ....domain.entities import (
    Domain,
    Notification,
    NotificationDraft,
    Registrar,
    SslCertificate,
    TrackableItem,
)
from ....domain.exceptions import ItemNotFoundError
from ....domain.value_objects import ItemKind, NotificationType
from .models import Base, DomainRecord, NotificationRecord, SslCertificateRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

_shared_connection_locks: WeakKeyDictionary[Engine, threading.Lock] = WeakKeyDictionary()


def create_session_factory(
    database_url: str, *, create_schema: bool = False, **engine_kwargs
) -> sessionmaker[Session]:
    """Create an engine and session factory, optionally creating missing tables."""
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine_kwargs.setdefault("poolclass", StaticPool)
    else:
        engine_kwargs.setdefault("pool_pre_ping", True)

    engine = create_engine(database_url, **engine_kwargs)
    if create_schema:
        init_schema(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_schema(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)


def _connection_lock(session_factory: sessionmaker[Session]) -> AbstractContextManager:
    engine = session_factory.kw.get("bind")
    if not isinstance(engine, Engine) or not isinstance(engine.pool, StaticPool):
        return nullcontext()
    return _shared_connection_locks.setdefault(engine, threading.Lock())


def _to_domain(record: DomainRecord) -> Domain:
    registrar = None
    if record.registrar is not None:
        registrar = Registrar(
            id=record.registrar.id,
            name=record.registrar.name,
            login_url=record.registrar.login_url,
            notes=record.registrar.notes,
        )
    return Domain(
        id=record.id,
        name=record.name,
        registrar_id=record.registrar_id,
        registrar=registrar,
        expiry_date=record.expiry_date,
        renewal_period_years=record.renewal_period_years,
        auto_renewal=record.auto_renewal,
        is_completed=record.is_completed,
        completed_at=record.completed_at,
        next_notification_date=record.next_notification_date,
        notes=record.notes,
        created_at=record.created_at,
    )


def _to_certificate(record: SslCertificateRecord) -> SslCertificate:
    return SslCertificate(
        id=record.id,
        domain=record.domain,
        issuer=record.issuer,
        expiry_date=record.expiry_date,
        renewal_period_years=record.renewal_period_years,
        auto_renewal=record.auto_renewal,
        is_completed=record.is_completed,
        completed_at=record.completed_at,
        next_notification_date=record.next_notification_date,
        notes=record.notes,
        created_at=record.created_at,
    )


def _to_notification(record: NotificationRecord) -> Notification:
    return Notification(
        id=record.id,
        type=ItemKind(record.type),
        item_id=record.item_id,
        item_name=record.item_name,
        notification_type=NotificationType(record.notification_type),
        expiry_date=record.expiry_date,
        is_read=record.is_read,
        created_at=record.created_at,
    )


class _SqlAdapter:
    """Shared session handling; SQLAlchemy errors surface as StoreError."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._lock = _connection_lock(session_factory)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with self._lock, self._session_factory() as session, session.begin():
            yield session

    def _in_session(self, work: Callable[[Session], T]) -> T:
        with self._session() as session:
            return work(session)

    async def _run(self, operation: str, work: Callable[[Session], T]) -> T:
        try:
            return await asyncio.to_thread(self._in_session, work)
        except (ItemNotFoundError, StoreError):
            raise
        except SQLAlchemyError as e:
            msg = f"Failed to {operation}: {e}"
            logger.exception(msg)
            raise StoreError(msg) from e


class SqlItemStore(_SqlAdapter):
    """
    Item store implementation using SQLAlchemy.

    Implements the ItemStore port over the ``domains`` and
    ``ssl_certificates`` tables.
    """

    _MODELS = {ItemKind.DOMAIN: DomainRecord, ItemKind.SSL: SslCertificateRecord}

    async def list_active_domains(self) -> list[Domain]:
        def work(session: Session) -> list[Domain]:
            records = session.scalars(
                select(DomainRecord)
                .where(DomainRecord.is_completed.is_(False))
                .order_by(DomainRecord.expiry_date.asc())
            ).unique()
            return [_to_domain(r) for r in records]

        return await self._run("list domains", work)

    async def list_active_ssl_certificates(self) -> list[SslCertificate]:
        def work(session: Session) -> list[SslCertificate]:
            records = session.scalars(
                select(SslCertificateRecord)
                .where(SslCertificateRecord.is_completed.is_(False))
                .order_by(SslCertificateRecord.expiry_date.asc())
            )
            return [_to_certificate(r) for r in records]

        return await self._run("list SSL certificates", work)

    async def set_next_notification_date(
        self, kind: ItemKind, item_id: str, when: datetime | None
    ) -> None:
        def work(session: Session) -> None:
            record = self._get_record(session, kind, item_id)
            record.next_notification_date = when

        await self._run(f"update {kind.label} {item_id}", work)

    async def mark_completed(self, kind: ItemKind, item_id: str) -> TrackableItem:
        def work(session: Session) -> TrackableItem:
            record = self._get_record(session, kind, item_id)
            record.is_completed = True
            record.completed_at = datetime.now(UTC)
            record.next_notification_date = None
            session.flush()
            return _to_domain(record) if kind is ItemKind.DOMAIN else _to_certificate(record)

        item = await self._run(f"complete {kind.label} {item_id}", work)
        logger.info("Marked %s %s completed", kind.label, item.display_name)
        return item

    def _get_record(
        self, session: Session, kind: ItemKind, item_id: str
    ) -> DomainRecord | SslCertificateRecord:
        record = session.get(self._MODELS[kind], item_id)
        if record is None:
            msg = f"{kind.label} {item_id} not found"
            raise ItemNotFoundError(msg)
        return record


class SqlNotificationLedger(_SqlAdapter):
    """Notification ledger over the ``notifications`` table, unique per dedup key."""

    async def create_notification(self, draft: NotificationDraft) -> Notification:
        key = draft.dedup_key

        def work(session: Session) -> Notification:
            record = NotificationRecord(
                type=draft.type.value,
                item_id=draft.item_id,
                item_name=draft.item_name,
                notification_type=draft.notification_type.value,
                expiry_date=draft.expiry_date,
                is_read=False,
                dedup_key=key,
            )
            session.add(record)
            session.flush()
            return _to_notification(record)

        try:
            return await asyncio.to_thread(self._in_session, work)
        except IntegrityError as e:
            # Only a clash on dedup_key is a duplicate; other constraints are real failures
            if await self.has_notification(draft):
                raise DuplicateNotificationError(key) from e
            msg = f"Failed to record notification {key}: {e.orig}"
            logger.exception(msg)
            raise StoreError(msg) from e
        except SQLAlchemyError as e:
            msg = f"Failed to record notification: {e}"
            logger.exception(msg)
            raise StoreError(msg) from e

    async def has_notification(self, draft: NotificationDraft) -> bool:
        def work(session: Session) -> bool:
            found = session.scalar(
                select(NotificationRecord.id).where(NotificationRecord.dedup_key == draft.dedup_key)
            )
            return found is not None

        return await self._run("look up notification", work)

    async def list_notifications(self) -> list[Notification]:
        return await self._list(unread_only=False)

    async def list_unread(self) -> list[Notification]:
        return await self._list(unread_only=True)

    async def mark_read(self, notification_id: str) -> Notification:
        def work(session: Session) -> Notification:
            record = session.get(NotificationRecord, notification_id)
            if record is None:
                msg = f"Notification {notification_id} not found"
                raise ItemNotFoundError(msg)
            record.is_read = True
            session.flush()
            return _to_notification(record)

        return await self._run(f"mark notification {notification_id} read", work)

    async def delete(self, notification_id: str) -> None:
        def work(session: Session) -> None:
            record = session.get(NotificationRecord, notification_id)
            if record is not None:
                session.delete(record)

        await self._run(f"delete notification {notification_id}", work)

    async def _list(self, *, unread_only: bool) -> list[Notification]:
        def work(session: Session) -> list[Notification]:
            query = select(NotificationRecord).order_by(NotificationRecord.created_at.desc())
            if unread_only:
                query = query.where(NotificationRecord.is_read.is_(False))
            return [_to_notification(r) for r in session.scalars(query)]

        return await self._run("list notifications", work)
