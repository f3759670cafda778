"""Seed database with a demo flow and contacts."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from datetime import datetime

from sqlalchemy import select

from .session import async_session_factory, init_db
from .models import ContactModel, FlowModel

logger = logging.getLogger(__name__)


def generate_flow_id(name: str) -> str:
    """Generate a unique flow ID."""
    timestamp = int(time.time() * 1000)
    # Include name in hash to ensure uniqueness for same-millisecond calls
    hash_input = f"{timestamp}_{name}"
    hash_suffix = hashlib.sha256(hash_input.encode()).hexdigest()[:8]
    return f"flow_{timestamp}_{hash_suffix}"


EXAMPLE_FLOWS = [
    {
        "name": "Welcome Customers",
        "description": "Tags existing customers as VIP and greets everyone else on WhatsApp",
        "trigger_type": "manual",
        "nodes": [
            {
                "id": "trigger-1",
                "type": "trigger",
                "config": {"type": "manual"},
                "position": {"x": 250, "y": 50},
            },
            {
                "id": "condition-1",
                "type": "condition",
                "config": {"field": "lifecycle_stage", "operator": "equals", "value": "CUSTOMER"},
                "position": {"x": 250, "y": 180},
            },
            {
                "id": "tag-1",
                "type": "tag",
                "config": {"action": "add", "tagName": "vip"},
                "position": {"x": 100, "y": 320},
            },
            {
                "id": "message-1",
                "type": "message",
                "config": {"channel": "whatsapp", "customMessage": "Welcome {{name}}!"},
                "position": {"x": 400, "y": 320},
            },
            {
                "id": "end-1",
                "type": "end",
                "config": {},
                "position": {"x": 250, "y": 460},
            },
        ],
        "edges": [
            {"id": "e-trigger-1-condition-1", "source": "trigger-1", "target": "condition-1"},
            {
                "id": "e-condition-1-tag-1",
                "source": "condition-1",
                "target": "tag-1",
                "branchLabel": "true",
            },
            {
                "id": "e-condition-1-message-1",
                "source": "condition-1",
                "target": "message-1",
                "branchLabel": "false",
            },
            {"id": "e-tag-1-end-1", "source": "tag-1", "target": "end-1"},
            {"id": "e-message-1-end-1", "source": "message-1", "target": "end-1"},
        ],
    },
]

EXAMPLE_CONTACTS = [
    {
        "id": "contact-customer",
        "full_name": "Ana Costa",
        "email": "ana@example.com",
        "phone": "+15550100",
        "phone_e164": "+15550100",
        "lifecycle_stage": "CUSTOMER",
        "total_spend": 420.0,
        "last_payment_status": "succeeded",
        "tags": [],
    },
    {
        "id": "contact-lead",
        "full_name": "Sam Lee",
        "email": "sam@example.com",
        "phone": "+15550101",
        "lifecycle_stage": "LEAD",
        "total_spend": 0,
        "tags": [],
    },
]


async def seed_demo_data() -> int:
    """Seed the database with the demo flow and contacts. Returns rows added."""
    await init_db()

    async with async_session_factory() as session:
        result = await session.execute(select(FlowModel.name))
        existing_names = set(result.scalars().all())

        added = 0
        for flow_data in EXAMPLE_FLOWS:
            if flow_data["name"] in existing_names:
                logger.info("Skipping flow '%s' - already exists", flow_data["name"])
                continue

            session.add(
                FlowModel(
                    id=generate_flow_id(flow_data["name"]),
                    is_active=True,
                    is_draft=False,
                    created_at=datetime.now(),
                    updated_at=datetime.now(),
                    **flow_data,
                )
            )
            added += 1
            logger.info("Added flow: %s", flow_data["name"])

        for contact_data in EXAMPLE_CONTACTS:
            if await session.get(ContactModel, contact_data["id"]):
                continue
            session.add(ContactModel(**contact_data))
            added += 1
            logger.info("Added contact: %s", contact_data["id"])

        await session.commit()

    logger.info("Seeding complete. Added %d rows.", added)
    return added


def main() -> None:
    """Run the seed script."""
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed_demo_data())


if __name__ == "__main__":
    main()
