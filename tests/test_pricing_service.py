"""Unit tests for the pricing service and repository (mocked cursor, no Postgres)."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from cityventure.domain.seasonal_pricing import PricingConfiguration
from cityventure.infra.repositories.seasonal_pricing_repository import (
    PRICING_COLUMNS,
    fetch_active_pricing,
    fetch_business_pricing,
    fetch_room,
)
from cityventure.services.pricing_service import (
    RoomNotFoundError,
    list_business_pricing,
    load_room_pricing,
)


@pytest.fixture
def cur():
    """Mocked psycopg2 cursor."""
    return MagicMock()


def _pricing_row(**overrides):
    record = dict.fromkeys(PRICING_COLUMNS)
    record.update(id="pricing-1", business_id="biz-1", room_id="room-1")
    record.update(overrides)
    return tuple(record[c] for c in PRICING_COLUMNS)


class TestRepository:
    def test_fetch_room(self, cur):
        cur.fetchone.return_value = ("room-1", "biz-1", Decimal("900"))
        assert fetch_room(cur, "room-1") == {
            "id": "room-1",
            "business_id": "biz-1",
            "room_price": Decimal("900"),
        }
        assert cur.execute.call_args[0][1] == ("room-1",)

    def test_fetch_room_missing(self, cur):
        cur.fetchone.return_value = None
        assert fetch_room(cur, "room-x") is None

    def test_fetch_active_pricing_maps_columns(self, cur):
        cur.fetchone.return_value = _pricing_row(base_price=Decimal("1000"))
        record = fetch_active_pricing(cur, room_id="room-1")
        assert record["base_price"] == Decimal("1000")
        assert record["id"] == "pricing-1"

    def test_fetch_active_pricing_room_scope_only(self, cur):
        """A business-wide row (room_id IS NULL) never prices a room."""
        cur.fetchone.return_value = None
        assert fetch_active_pricing(cur, room_id="room-1") is None

        query, params = cur.execute.call_args[0]
        assert params == ("room-1",)
        assert "WHERE room_id = %s" in query
        assert "room_id IS NULL" not in query
        assert "business_id" not in query.split("WHERE", 1)[1]
        assert "ORDER BY created_at DESC" in query

    def test_fetch_business_pricing_newest_first(self, cur):
        cur.fetchall.return_value = [
            _pricing_row(id="pricing-2", room_id=None, base_price=Decimal("1200")),
            _pricing_row(id="pricing-1", base_price=Decimal("1000")),
        ]
        records = fetch_business_pricing(cur, "biz-1")

        assert [r["id"] for r in records] == ["pricing-2", "pricing-1"]
        assert records[0]["room_id"] is None
        query, params = cur.execute.call_args[0]
        assert params == ("biz-1",)
        assert "business_id = %s" in query
        assert "is_active = TRUE" in query
        assert "ORDER BY created_at DESC" in query

    def test_fetch_business_pricing_empty(self, cur):
        cur.fetchall.return_value = []
        assert fetch_business_pricing(cur, "biz-x") == []


class TestLoadRoomPricing:
    def test_room_not_found(self, cur):
        cur.fetchone.return_value = None
        with pytest.raises(RoomNotFoundError) as exc:
            load_room_pricing(cur, "room-x")
        assert exc.value.room_id == "room-x"
        # Only the room lookup ran
        assert cur.execute.call_count == 1

    def test_configured(self, cur):
        cur.fetchone.side_effect = [
            ("room-1", "biz-1", Decimal("900")),
            _pricing_row(
                base_price=Decimal("1000"),
                peak_season_months=[12],
                peak_season_price=Decimal("1500"),
            ),
        ]
        pricing = load_room_pricing(cur, "room-1")

        assert pricing.default_price == Decimal("900")
        assert pricing.config == PricingConfiguration(
            base_price=Decimal("1000"),
            peak_season_months=frozenset({12}),
            peak_season_price=Decimal("1500"),
        )

    def test_unconfigured(self, cur):
        cur.fetchone.side_effect = [("room-1", "biz-1", None), None]
        pricing = load_room_pricing(cur, "room-1")

        assert pricing.config is None
        assert pricing.default_price is None

    def test_business_wide_row_is_not_used_for_room(self, cur):
        """Only the room lookup's own row counts; no match means default pricing."""
        cur.fetchone.side_effect = [("room-1", "biz-1", Decimal("900")), None]
        pricing = load_room_pricing(cur, "room-1")

        assert pricing.config is None
        assert pricing.default_price == Decimal("900")
        _, params = cur.execute.call_args[0]
        assert params == ("room-1",)


class TestListBusinessPricing:
    def test_normalizes_each_record(self, cur):
        cur.fetchall.return_value = [
            _pricing_row(
                id="pricing-2",
                room_id=None,
                base_price=Decimal("1200"),
                weekend_days='["sat"]',
            ),
            _pricing_row(id="pricing-1", peak_season_months="[12, 1]"),
        ]
        items = list_business_pricing(cur, "biz-1")

        assert [i["id"] for i in items] == ["pricing-2", "pricing-1"]
        assert items[0]["room_id"] is None
        assert items[0]["weekend_days"] == ["Saturday"]
        assert items[1]["room_id"] == "room-1"
        assert items[1]["peak_season_months"] == [1, 12]

    def test_empty(self, cur):
        cur.fetchall.return_value = []
        assert list_business_pricing(cur, "biz-x") == []
