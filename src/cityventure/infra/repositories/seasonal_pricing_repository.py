"""Seasonal pricing repository - read-only access to rooms and pricing configs.

Uses raw SQL with psycopg2 (no ORM). Rows are returned as plain dicts keyed by
column name; normalization happens in the domain layer.
"""

from __future__ import annotations

from typing import Any

from psycopg2.extensions import cursor as PgCursor

from cityventure.infra.db import fetchall, fetchone

PRICING_COLUMNS = (
    "id",
    "business_id",
    "room_id",
    "base_price",
    "weekend_price",
    "weekend_days",
    "peak_season_price",
    "peak_season_months",
    "high_season_price",
    "high_season_months",
    "low_season_price",
    "low_season_months",
)


def fetch_room(cur: PgCursor, room_id: str) -> dict[str, Any] | None:
    """Return {id, business_id, room_price} for a room, or None if unknown."""
    row = fetchone(
        cur,
        "SELECT id, business_id, room_price FROM rooms WHERE id = %s",
        (room_id,),
    )
    if row is None:
        return None
    return {"id": str(row[0]), "business_id": row[1], "room_price": row[2]}


def fetch_active_pricing(cur: PgCursor, *, room_id: str) -> dict[str, Any] | None:
    """Return the active pricing record configured for a room.

    Only rows with this room_id apply; a room without its own row is priced at
    its room_price by the caller. The most recently created row wins.

    Returns:
        Dict keyed by PRICING_COLUMNS, or None when nothing is configured.
    """
    columns = ", ".join(PRICING_COLUMNS)
    row = fetchone(
        cur,
        f"""
        SELECT {columns}
        FROM seasonal_pricing
        WHERE room_id = %s
          AND is_active = TRUE
        ORDER BY created_at DESC
        LIMIT 1
        """,
        (room_id,),
    )
    if row is None:
        return None
    return dict(zip(PRICING_COLUMNS, row))


def fetch_business_pricing(cur: PgCursor, business_id: str) -> list[dict[str, Any]]:
    """Return every active pricing record of a business, newest first.

    Includes room-specific and business-wide (room_id IS NULL) rows.
    """
    columns = ", ".join(PRICING_COLUMNS)
    rows = fetchall(
        cur,
        f"""
        SELECT {columns}
        FROM seasonal_pricing
        WHERE business_id = %s
          AND is_active = TRUE
        ORDER BY created_at DESC
        """,
        (business_id,),
    )
    return [dict(zip(PRICING_COLUMNS, row)) for row in rows]
