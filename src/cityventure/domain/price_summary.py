"""Listing extremes and stay breakdown summaries.

Pure functions over a pricing configuration or a resolved PriceRange.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Iterable

from cityventure.domain.seasonal_pricing import (
    ConfigLike,
    NightlyPrice,
    PriceRange,
    PriceType,
    as_configuration,
)

_THOUSANDTHS = Decimal("0.001")


@dataclass(frozen=True)
class PriceExtremes:
    lowest: Any
    highest: Any

    def to_dict(self) -> dict[str, Any]:
        return {"lowest": self.lowest, "highest": self.highest}


@dataclass(frozen=True)
class BreakdownGroup:
    price_type: PriceType
    count: int
    representative_price: Decimal

    @property
    def label(self) -> str:
        return self.price_type.value.replace("_", " ").title()


def configured_prices(config: ConfigLike) -> list[Decimal]:
    """Return every configured, positive tier price (base, low, high, peak, weekend)."""
    resolved = as_configuration(config)
    if resolved is None:
        return []
    candidates = (
        resolved.base_price,
        resolved.low_season_price,
        resolved.high_season_price,
        resolved.peak_season_price,
        resolved.weekend_price,
    )
    return [p for p in candidates if p is not None]


def price_extremes(config: ConfigLike, default_price: Any) -> PriceExtremes:
    """Theoretical lowest/highest nightly price for listing displays.

    The weekend price counts toward both bounds even though it only acts as a
    floor during per-night resolution. Without any configured price both
    bounds equal *default_price*.
    """
    prices = configured_prices(config)
    if not prices:
        return PriceExtremes(lowest=default_price, highest=default_price)
    return PriceExtremes(lowest=min(prices), highest=max(prices))


def lowest_price(config: ConfigLike, default_price: Any) -> Any:
    return price_extremes(config, default_price).lowest


def highest_price(config: ConfigLike, default_price: Any) -> Any:
    return price_extremes(config, default_price).highest


def summarize_breakdown(
    entries: PriceRange | Iterable[NightlyPrice],
) -> list[BreakdownGroup]:
    """Group nights by price type, in first-seen order.

    The representative price is that of the first night of each type. Nights of
    the same type with different prices are not reconciled.
    """
    if isinstance(entries, PriceRange):
        entries = entries.entries

    counts: dict[PriceType, int] = {}
    first_price: dict[PriceType, Decimal] = {}
    for entry in entries:
        if entry.price_type not in counts:
            counts[entry.price_type] = 0
            first_price[entry.price_type] = entry.price
        counts[entry.price_type] += 1

    return [
        BreakdownGroup(
            price_type=price_type,
            count=count,
            representative_price=first_price[price_type],
        )
        for price_type, count in counts.items()
    ]


def format_amount(value: Any) -> str:
    """Format an amount with thousands separators and at most 3 decimals.

    Trailing zeros are dropped: 1500 -> "1,500", 1234.50 -> "1,234.5".
    """
    amount = Decimal(str(value))
    with localcontext() as ctx:
        # Room for every integer digit plus the three decimals
        ctx.prec = max(ctx.prec, amount.adjusted() + 5)
        amount = amount.quantize(_THOUSANDTHS, rounding=ROUND_HALF_UP)
    text = f"{amount:,.3f}"
    return text.rstrip("0").rstrip(".")


def format_breakdown(
    entries: PriceRange | Iterable[NightlyPrice],
    *,
    currency_symbol: str = "₱",
) -> str:
    """Render a stay breakdown as one line per price type.

    Example:
        2 night(s) @ ₱1,500 (Peak Season)
        1 night(s) @ ₱1,800 (Weekend)
    """
    lines = [
        f"{group.count} night(s) @ {currency_symbol}"
        f"{format_amount(group.representative_price)} ({group.label})"
        for group in summarize_breakdown(entries)
    ]
    return "\n".join(lines)
