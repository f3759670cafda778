"""Contact-backed entity store."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import EntityNotFoundError
from ..db.models import ContactModel
from ..engine.types import EntitySnapshot
from .base import EntityStore

logger = logging.getLogger(__name__)

# Contact columns exposed to handlers through the snapshot
SNAPSHOT_FIELDS = (
    "id",
    "full_name",
    "email",
    "phone",
    "phone_e164",
    "lifecycle_stage",
    "total_spend",
    "last_payment_status",
)


class SqlEntityStore(EntityStore):
    """Entity store over the ``contacts`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def read_snapshot(self, entity_id: str) -> EntitySnapshot | None:
        contact = await self._load(entity_id)
        if not contact:
            return None
        return EntitySnapshot(
            entity_id=contact.id,
            fields={name: getattr(contact, name) for name in SNAPSHOT_FIELDS},
            tags=frozenset(contact.tags or []),
        )

    async def add_tag(self, entity_id: str, tag: str) -> frozenset[str]:
        contact = await self._require(entity_id)
        current = list(contact.tags or [])
        if tag in current:
            return frozenset(current)

        contact.tags = [*current, tag]
        contact.updated_at = datetime.now()
        await self._session.commit()
        logger.info("Added tag %r to entity %s", tag, entity_id)
        return frozenset(contact.tags)

    async def remove_tag(self, entity_id: str, tag: str) -> frozenset[str]:
        contact = await self._require(entity_id)
        current = list(contact.tags or [])
        if tag not in current:
            return frozenset(current)

        contact.tags = [t for t in current if t != tag]
        contact.updated_at = datetime.now()
        await self._session.commit()
        logger.info("Removed tag %r from entity %s", tag, entity_id)
        return frozenset(contact.tags)

    async def _load(self, entity_id: str) -> ContactModel | None:
        # Always re-read so a resumed run never sees identity-map leftovers
        return await self._session.get(ContactModel, entity_id, populate_existing=True)

    async def _require(self, entity_id: str) -> ContactModel:
        contact = await self._load(entity_id)
        if not contact:
            raise EntityNotFoundError(entity_id)
        return contact
