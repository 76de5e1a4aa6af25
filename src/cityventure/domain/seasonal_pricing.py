"""Seasonal & weekend price resolution.

Pure calculation functions for month-based seasonal pricing. No DB access here;
the caller is responsible for fetching the pricing configuration.

Rules:
- Tier priority is fixed: peak > high > low > base. Month sets may overlap.
- The weekend price is a floor: it only applies when strictly greater than the
  price already resolved for that night.
- Dates are local, time-zone-naive calendar days. A datetime contributes its own
  year/month/day fields and is never converted to UTC first.
- Stays are half-open: [check_in, check_out). The departure day is not charged.
- Prices are Decimal and never rounded here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Iterator, Mapping, Union

logger = logging.getLogger(__name__)

# Indexed by date.weekday(); independent of the process locale.
WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_WEEKDAY_LOOKUP: dict[str, str] = {}
for _name in WEEKDAY_NAMES:
    _WEEKDAY_LOOKUP[_name.lower()] = _name
    _WEEKDAY_LOOKUP[_name[:3].lower()] = _name

_ZERO = Decimal("0")


class PriceType(str, Enum):
    DEFAULT = "default"
    BASE = "base"
    LOW_SEASON = "low_season"
    HIGH_SEASON = "high_season"
    PEAK_SEASON = "peak_season"
    WEEKEND = "weekend"


# ── Boundary normalization ───────────────────────────────


def parse_price(value: Any) -> Decimal | None:
    """Return a positive Decimal price, or None when the value means "unset".

    None, empty strings, zero, negatives, NaN/infinity, booleans and anything
    non-numeric all collapse to None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        price = value
    elif isinstance(value, int):
        price = Decimal(value)
    elif isinstance(value, (float, str)):
        text = str(value).strip()
        if not text:
            return None
        try:
            price = Decimal(text)
        except InvalidOperation:
            logger.debug("discarding non-numeric price %r", value)
            return None
    else:
        return None

    if not price.is_finite() or price <= _ZERO:
        return None
    return price


def _parse_array(value: Any) -> list:
    """Accept a native sequence or a JSON-encoded array; anything else is empty."""
    if value is None:
        return []
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            value = json.loads(text)
        except ValueError:
            logger.debug("discarding unparseable array field")
            return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return []


def parse_months(value: Any) -> frozenset[int]:
    """Normalize a month set (list or JSON text) to a frozenset of 1..12."""
    months: set[int] = set()
    for item in _parse_array(value):
        if isinstance(item, bool):
            continue
        if isinstance(item, str) and item.strip().isdigit():
            item = int(item.strip())
        if isinstance(item, float) and item.is_integer():
            item = int(item)
        if isinstance(item, int) and 1 <= item <= 12:
            months.add(item)
    return frozenset(months)


def parse_weekdays(value: Any) -> frozenset[str]:
    """Normalize weekday names ("saturday", "Sat") to canonical English names."""
    days: set[str] = set()
    for item in _parse_array(value):
        if not isinstance(item, str):
            continue
        name = _WEEKDAY_LOOKUP.get(item.strip().lower())
        if name is not None:
            days.add(name)
    return frozenset(days)


@dataclass(frozen=True)
class PricingConfiguration:
    """Tiered pricing for one bookable unit.

    Attributes:
        base_price: Fallback nightly price, None when not configured.
        peak_season_months / high_season_months / low_season_months:
            Months (1..12) of each tier. Tiers may overlap.
        peak_season_price / high_season_price / low_season_price:
            Tier prices, None when not configured.
        weekend_days: Canonical weekday names that get the weekend floor.
        weekend_price: Weekend floor price, None when not configured.
    """

    base_price: Decimal | None = None
    peak_season_months: frozenset[int] = field(default_factory=frozenset)
    peak_season_price: Decimal | None = None
    high_season_months: frozenset[int] = field(default_factory=frozenset)
    high_season_price: Decimal | None = None
    low_season_months: frozenset[int] = field(default_factory=frozenset)
    low_season_price: Decimal | None = None
    weekend_days: frozenset[str] = field(default_factory=frozenset)
    weekend_price: Decimal | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any] | None) -> PricingConfiguration | None:
        """Build a configuration from a raw record (DB row dict or API JSON).

        Malformed fields are treated as unconfigured, and anything that is not
        a mapping counts as no configuration; this never raises.
        """
        if not isinstance(record, Mapping):
            return None
        return cls(
            base_price=parse_price(record.get("base_price")),
            peak_season_months=parse_months(record.get("peak_season_months")),
            peak_season_price=parse_price(record.get("peak_season_price")),
            high_season_months=parse_months(record.get("high_season_months")),
            high_season_price=parse_price(record.get("high_season_price")),
            low_season_months=parse_months(record.get("low_season_months")),
            low_season_price=parse_price(record.get("low_season_price")),
            weekend_days=parse_weekdays(record.get("weekend_days")),
            weekend_price=parse_price(record.get("weekend_price")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_price": self.base_price,
            "peak_season_months": sorted(self.peak_season_months),
            "peak_season_price": self.peak_season_price,
            "high_season_months": sorted(self.high_season_months),
            "high_season_price": self.high_season_price,
            "low_season_months": sorted(self.low_season_months),
            "low_season_price": self.low_season_price,
            "weekend_days": [d for d in WEEKDAY_NAMES if d in self.weekend_days],
            "weekend_price": self.weekend_price,
        }


ConfigLike = Union[PricingConfiguration, Mapping[str, Any], None]
DayLike = Union[date, datetime, str]


def as_configuration(config: ConfigLike) -> PricingConfiguration | None:
    """Return *config* as a PricingConfiguration, normalizing raw mappings."""
    if config is None or isinstance(config, PricingConfiguration):
        return config
    return PricingConfiguration.from_record(config)


def to_calendar_day(value: DayLike) -> date:
    """Interpret *value* as a local calendar day.

    datetime values keep their own wall-clock date (no UTC conversion), so
    2025-12-31T23:30-03:00 is December 31st. Strings must be ISO dates.

    Raises:
        ValueError: If a string is not an ISO date.
        TypeError: If the value is not a date, datetime or string.
    """
    if isinstance(value, datetime):
        return date(value.year, value.month, value.day)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Unsupported date value: {type(value).__name__}")


# ── Results ──────────────────────────────────────────────


@dataclass(frozen=True)
class NightlyPrice:
    date: date
    day_name: str
    price: Decimal
    price_type: PriceType

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "day_name": self.day_name,
            "price": self.price,
            "price_type": self.price_type.value,
        }


@dataclass(frozen=True)
class PriceRange:
    """Nightly prices for the half-open stay [check_in, check_out)."""

    check_in: date
    check_out: date
    entries: tuple[NightlyPrice, ...] = ()
    total: Decimal = _ZERO

    @property
    def nights(self) -> int:
        return len(self.entries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "breakdown": [entry.to_dict() for entry in self.entries],
            "summary": {
                "total_price": self.total,
                "nights": self.nights,
                "check_in": self.check_in.isoformat(),
                "check_out": self.check_out.isoformat(),
            },
        }


# ── Resolution ───────────────────────────────────────────


def _fallback_price(default_price: Any) -> Decimal:
    return parse_price(default_price) or _ZERO


def _resolve_day(
    day: date,
    config: PricingConfiguration | None,
    default_price: Decimal,
) -> NightlyPrice:
    day_name = WEEKDAY_NAMES[day.weekday()]

    if config is None:
        return NightlyPrice(day, day_name, default_price, PriceType.DEFAULT)

    price = config.base_price if config.base_price is not None else default_price
    price_type = PriceType.BASE

    month = day.month
    if month in config.peak_season_months and config.peak_season_price is not None:
        price, price_type = config.peak_season_price, PriceType.PEAK_SEASON
    elif month in config.high_season_months and config.high_season_price is not None:
        price, price_type = config.high_season_price, PriceType.HIGH_SEASON
    elif month in config.low_season_months and config.low_season_price is not None:
        price, price_type = config.low_season_price, PriceType.LOW_SEASON

    # Floor, not override
    weekend_price = config.weekend_price
    if (
        day_name in config.weekend_days
        and weekend_price is not None
        and weekend_price > price
    ):
        price, price_type = weekend_price, PriceType.WEEKEND

    return NightlyPrice(day, day_name, price, price_type)


def resolve_price(
    day: DayLike,
    config: ConfigLike,
    *,
    default_price: Any = None,
) -> NightlyPrice:
    """Resolve the nightly price for a single calendar day.

    Args:
        day: Calendar day (date, datetime or ISO string), read as a local date.
        config: PricingConfiguration, a raw record mapping, or None.
        default_price: Price used when no configuration (or no base price) exists.

    Returns:
        NightlyPrice with the resolved price and the rule that produced it.
    """
    return _resolve_day(
        to_calendar_day(day),
        as_configuration(config),
        _fallback_price(default_price),
    )


def resolve_range(
    start: DayLike,
    end: DayLike,
    config: ConfigLike,
    *,
    default_price: Any = None,
) -> PriceRange:
    """Resolve nightly prices for the stay [start, end).

    start >= end is a zero-night stay and returns an empty result with total 0.
    The total is the exact sum of the nightly prices.
    """
    check_in = to_calendar_day(start)
    check_out = to_calendar_day(end)
    resolved = as_configuration(config)
    fallback = _fallback_price(default_price)

    entries: list[NightlyPrice] = []
    total = _ZERO
    for night in iter_nights(check_in, check_out):
        entry = _resolve_day(night, resolved, fallback)
        entries.append(entry)
        total += entry.price

    return PriceRange(
        check_in=check_in,
        check_out=check_out,
        entries=tuple(entries),
        total=total,
    )


def iter_nights(start: DayLike, end: DayLike) -> Iterator[date]:
    """Yield each charged night of the stay [start, end)."""
    current = to_calendar_day(start)
    stop = to_calendar_day(end)
    while current < stop:
        yield current
        current += timedelta(days=1)
