"""Seasonal pricing endpoints.

Server-side recomputation of nightly prices. Uses the same domain functions as
in-process callers, so both always agree.

GET /seasonal-pricing/business/{business_id}: active configurations of a business
GET /seasonal-pricing/room/{room_id}: active configuration (or null)
GET /seasonal-pricing/room/{room_id}/calculate: price for one date
GET /seasonal-pricing/room/{room_id}/calculate-range: stay breakdown and total
GET /seasonal-pricing/room/{room_id}/price-range: lowest/highest for listings
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from cityventure.domain.price_summary import price_extremes
from cityventure.domain.seasonal_pricing import resolve_price, resolve_range
from cityventure.infra.db import txn
from cityventure.observability.logging import get_logger
from cityventure.services.pricing_service import (
    RoomNotFoundError,
    RoomPricing,
    list_business_pricing,
    load_room_pricing,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/seasonal-pricing", tags=["seasonal-pricing"])

MAX_RANGE_NIGHTS = 366


# ── Schemas ───────────────────────────────────────────────


class PricingConfigOut(BaseModel):
    base_price: float | None = None
    peak_season_months: list[int] = []
    peak_season_price: float | None = None
    high_season_months: list[int] = []
    high_season_price: float | None = None
    low_season_months: list[int] = []
    low_season_price: float | None = None
    weekend_days: list[str] = []
    weekend_price: float | None = None


class PricingRecordOut(PricingConfigOut):
    id: str
    room_id: str | None = None


class NightlyPriceOut(BaseModel):
    date: date
    day_name: str
    price: float
    price_type: str


class StaySummaryOut(BaseModel):
    total_price: float
    nights: int
    check_in: date
    check_out: date


class PriceRangeOut(BaseModel):
    breakdown: list[NightlyPriceOut]
    summary: StaySummaryOut


class PriceExtremesOut(BaseModel):
    lowest: float | None
    highest: float | None


# ── Helpers ───────────────────────────────────────────────


def _load(room_id: str) -> RoomPricing:
    try:
        with txn() as cur:
            return load_room_pricing(cur, room_id)
    except RoomNotFoundError:
        raise HTTPException(status_code=404, detail="Room not found")


# ── GET /seasonal-pricing/business/{business_id} ─────────


@router.get("/business/{business_id}", response_model=list[PricingRecordOut])
def get_business_pricing(business_id: str) -> list[dict]:
    """Return the active configurations of a business, newest first.

    Returns an empty list when nothing is configured.
    """
    with txn() as cur:
        return list_business_pricing(cur, business_id)


# ── GET /seasonal-pricing/room/{room_id} ─────────────────


@router.get("/room/{room_id}", response_model=PricingConfigOut | None)
def get_room_pricing(room_id: str) -> dict | None:
    """Return the active configuration for a room.

    Returns null (not 404) when the room has no pricing configured, so callers
    can fall back to the room price.
    """
    pricing = _load(room_id)
    if pricing.config is None:
        return None
    return pricing.config.to_dict()


# ── GET /seasonal-pricing/room/{room_id}/calculate ───────


@router.get("/room/{room_id}/calculate", response_model=NightlyPriceOut)
def calculate_price_for_date(room_id: str, date: date) -> dict:
    """Price for a single night."""
    pricing = _load(room_id)
    nightly = resolve_price(date, pricing.config, default_price=pricing.default_price)
    return nightly.to_dict()


# ── GET /seasonal-pricing/room/{room_id}/calculate-range ─


@router.get("/room/{room_id}/calculate-range", response_model=PriceRangeOut)
def calculate_price_for_range(
    room_id: str,
    start_date: date,
    end_date: date,
) -> dict:
    """Per-night breakdown and total for the stay [start_date, end_date).

    start_date >= end_date is a zero-night stay, not an error.
    """
    if (end_date - start_date).days > MAX_RANGE_NIGHTS:
        raise HTTPException(
            status_code=400,
            detail=f"max range: {MAX_RANGE_NIGHTS} nights",
        )

    pricing = _load(room_id)
    result = resolve_range(
        start_date,
        end_date,
        pricing.config,
        default_price=pricing.default_price,
    )

    logger.info(
        "price range calculated",
        extra={
            "extra_fields": {
                "room_id": room_id,
                "nights": result.nights,
                "total_price": result.total,
            }
        },
    )
    return result.to_dict()


# ── GET /seasonal-pricing/room/{room_id}/price-range ─────


@router.get("/room/{room_id}/price-range", response_model=PriceExtremesOut)
def get_price_extremes(room_id: str) -> dict:
    """Lowest and highest configured nightly price ("starting at" displays)."""
    pricing = _load(room_id)
    return price_extremes(pricing.config, pricing.default_price).to_dict()
