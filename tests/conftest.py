"""
Shared test fixtures for the Event AV assistant test suite.
"""

from types import SimpleNamespace
from typing import Any

import pytest
import structlog
from fastapi.testclient import TestClient

from eventav.models.property import (
    InventoryItem,
    InventoryStatus,
    LaborRule,
    Property,
    Room,
)
from eventav.services.property_repository import InMemoryPropertyRepository


@pytest.fixture(autouse=True)
def _set_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set required environment variables for tests so Settings can be instantiated."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-fake-key-for-testing")
    monkeypatch.setenv("SUPABASE_URL", "")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "")
    # Disable LangSmith tracing in tests
    monkeypatch.setenv("LANGCHAIN_TRACING_V2", "false")


@pytest.fixture(autouse=True)
def _configure_structlog_for_tests():
    """Configure structlog for tests using a simple, deterministic setup."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def client() -> TestClient:
    """FastAPI TestClient wrapping the main application (lifespan not run)."""
    # Clear the lru_cache so settings pick up test env vars
    from eventav.config import get_settings

    get_settings.cache_clear()

    from eventav.main import app

    app.dependency_overrides.clear()
    return TestClient(app)


# ---------------------------------------------------------------------------
# Property data
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_property() -> Property:
    return Property(
        id=1,
        name="Lakeshore Grand Hotel",
        property_code="LGH",
        location="Chicago, IL",
        contact_info="events@lakeshoregrand.example",
    )


@pytest.fixture
def sample_rooms() -> list[Room]:
    return [
        Room(
            property_id=1,
            name="Grand Ballroom",
            capacity=500,
            dimensions="120x80 ft",
            built_in_av="Ceiling projection screens, house sound system",
            features="Stage, dance floor",
        ),
        Room(
            property_id=1,
            name="Boardroom",
            capacity=20,
            dimensions="30x20 ft",
            built_in_av="65in display",
            features=None,
        ),
        Room(property_id=2, name="Rooftop Terrace", capacity=150),
    ]


@pytest.fixture
def sample_inventory() -> list[InventoryItem]:
    return [
        InventoryItem(
            property_id=1,
            name="Wireless Handheld Microphone",
            model="Shure ULXD2",
            description="UHF digital handheld mic",
            category="Audio",
            sub_category="Microphones",
            quantity_available=12,
        ),
        InventoryItem(
            property_id=1,
            name="Laser Projector",
            model="Epson L1505U",
            description="12,000 lumen WUXGA projector",
            category="Video",
            sub_category="Projectors",
            quantity_available=3,
        ),
        InventoryItem(
            property_id=1,
            name="LED Uplight",
            model=None,
            description="Battery RGBW uplight",
            category="Lighting",
            sub_category="Uplighting",
            quantity_available=24,
        ),
        InventoryItem(
            property_id=1,
            name="Broken Mixer",
            model="Yamaha TF1",
            description="Digital mixing console",
            category="Audio",
            sub_category="Mixers",
            quantity_available=1,
            status=InventoryStatus.MAINTENANCE,
        ),
        InventoryItem(
            property_id=2,
            name="Line Array Speaker",
            model="L-Acoustics Kara",
            description="Rooftop PA speaker",
            category="Audio",
            sub_category="Speakers",
            quantity_available=8,
        ),
    ]


@pytest.fixture
def sample_labor_rules() -> list[LaborRule]:
    return [
        LaborRule(
            property_id=1,
            rule_type="technician_ratio",
            rule_data='{"attendees_per_tech": 40, "minimum_techs": 2}',
        ),
        LaborRule(
            property_id=1,
            rule_type="union_requirements",
            rule_data='{"overtime_threshold": 8}',
        ),
    ]


@pytest.fixture
def repository(
    sample_property: Property,
    sample_rooms: list[Room],
    sample_inventory: list[InventoryItem],
) -> InMemoryPropertyRepository:
    """Two properties' worth of rooms and inventory, no labor rules."""
    return InMemoryPropertyRepository(
        properties=[sample_property, Property(id=2, name="Riverside Conference Center")],
        rooms=sample_rooms,
        inventory=sample_inventory,
    )


# ---------------------------------------------------------------------------
# Supabase fake
# ---------------------------------------------------------------------------


class FakeQuery:
    """Chainable stand-in for a PostgREST query builder; records every call."""

    def __init__(self, client: "FakeSupabaseClient", table: str):
        self.client = client
        self.table_name = table
        self.calls: list[tuple[str, tuple, dict]] = []

    def _record(self, name: str, *args: Any, **kwargs: Any) -> "FakeQuery":
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args: Any, **kwargs: Any) -> "FakeQuery":
        return self._record("select", *args, **kwargs)

    def eq(self, *args: Any, **kwargs: Any) -> "FakeQuery":
        return self._record("eq", *args, **kwargs)

    def or_(self, *args: Any, **kwargs: Any) -> "FakeQuery":
        return self._record("or_", *args, **kwargs)

    def order(self, *args: Any, **kwargs: Any) -> "FakeQuery":
        return self._record("order", *args, **kwargs)

    def limit(self, *args: Any, **kwargs: Any) -> "FakeQuery":
        return self._record("limit", *args, **kwargs)

    def upsert(self, *args: Any, **kwargs: Any) -> "FakeQuery":
        return self._record("upsert", *args, **kwargs)

    async def execute(self) -> SimpleNamespace:
        if self.client.fail_with is not None:
            raise self.client.fail_with
        return SimpleNamespace(data=self.client.responses.get(self.table_name, []))

    def filters(self, name: str) -> list[tuple]:
        return [args for call, args, _ in self.calls if call == name]


class FakeSupabaseClient:
    """Returns canned rows per table and keeps every query for inspection."""

    def __init__(self, responses: dict[str, list[dict]] | None = None):
        self.responses = responses or {}
        self.queries: list[FakeQuery] = []
        self.fail_with: Exception | None = None

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(self, name)
        self.queries.append(query)
        return query


@pytest.fixture
def fake_supabase() -> FakeSupabaseClient:
    return FakeSupabaseClient()
