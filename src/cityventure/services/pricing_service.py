"""Pricing service - loads pricing inputs for the seasonal pricing endpoints.

The calculation itself lives in cityventure.domain; this module only gathers
the room list price (the default price), the active configuration of a room,
and the configurations of a business.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from psycopg2.extensions import cursor as PgCursor

from cityventure.domain.seasonal_pricing import PricingConfiguration, parse_price
from cityventure.infra.repositories.seasonal_pricing_repository import (
    fetch_active_pricing,
    fetch_business_pricing,
    fetch_room,
)
from cityventure.observability.logging import get_logger

logger = get_logger(__name__)


class RoomNotFoundError(Exception):
    def __init__(self, room_id: str):
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


@dataclass(frozen=True)
class RoomPricing:
    room_id: str
    default_price: Decimal | None
    config: PricingConfiguration | None


def load_room_pricing(cur: PgCursor, room_id: str) -> RoomPricing:
    """Load the default price and active pricing configuration for a room.

    Args:
        cur: Database cursor (caller manages transaction).
        room_id: Room identifier.

    Returns:
        RoomPricing; config is None when no active configuration applies.

    Raises:
        RoomNotFoundError: The room does not exist.
    """
    room = fetch_room(cur, room_id)
    if room is None:
        raise RoomNotFoundError(room_id)

    record = fetch_active_pricing(cur, room_id=room_id)
    config = PricingConfiguration.from_record(record)

    logger.info(
        "room pricing loaded",
        extra={
            "extra_fields": {
                "room_id": room_id,
                "pricing_id": str(record["id"]) if record else None,
                "configured": config is not None,
            }
        },
    )

    return RoomPricing(
        room_id=room_id,
        default_price=parse_price(room["room_price"]),
        config=config,
    )


def list_business_pricing(cur: PgCursor, business_id: str) -> list[dict[str, Any]]:
    """List the active configurations of a business, newest first.

    Each item is the normalized configuration plus its id and room_id
    (None for business-wide rows). An unknown business yields an empty list.
    """
    records = fetch_business_pricing(cur, business_id)
    items = []
    for record in records:
        config = PricingConfiguration.from_record(record)
        items.append(
            {
                "id": str(record["id"]),
                "room_id": str(record["room_id"]) if record["room_id"] is not None else None,
                **config.to_dict(),
            }
        )
    return items
