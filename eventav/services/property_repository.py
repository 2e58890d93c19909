"""
Read-only data access for properties, rooms, inventory and labor rules.

Every query is scoped by property id, and inventory queries are always
restricted to status = 'available'. Neither restriction can be lifted by
callers: the filter arguments only narrow the result further.

Two implementations of the PropertyRepository protocol:
  SupabasePropertyRepository  — production, PostgreSQL through Supabase
  InMemoryPropertyRepository  — tests and local development without a DB
"""

from collections import defaultdict
from typing import Protocol

import structlog
from supabase._async.client import AsyncClient as AsyncSupabaseClient

from eventav.models.property import (
    InventoryItem,
    InventoryStatus,
    InventorySummaryLine,
    LaborRule,
    Property,
    PropertyContext,
    Room,
)

logger = structlog.get_logger(__name__)

# Characters with meaning inside a PostgREST or=() filter
_POSTGREST_RESERVED = str.maketrans({c: " " for c in ',()"\\*%'})


class PropertyRepository(Protocol):
    """Storage contract for the property data the chat core reads."""

    async def get_property(self, property_id: int) -> Property | None:
        """Fetch a property row."""

    async def list_properties(self) -> list[Property]:
        """All properties, ordered by name."""

    async def get_property_by_code(self, property_code: str) -> Property | None:
        """Property with exactly this property code."""

    async def list_rooms(self, property_id: int) -> list[Room]:
        """All rooms of a property, ordered by name."""

    async def get_room(self, property_id: int, room_name: str) -> Room | None:
        """Room with exactly this name within the property."""

    async def list_available_inventory(
        self,
        property_id: int,
        category: str | None = None,
        sub_category: str | None = None,
        search_term: str | None = None,
    ) -> list[InventoryItem]:
        """Available items, ordered by category then name. Filters are ANDed;
        search_term matches name OR description, case-insensitively."""

    async def list_labor_rules(self, property_id: int) -> list[LaborRule]:
        """All labor rules of a property."""


def _matches_search(item: InventoryItem, term: str) -> bool:
    needle = term.casefold()
    return needle in item.name.casefold() or needle in (item.description or "").casefold()


class InMemoryPropertyRepository:
    """In-memory repository used for tests and local fallback."""

    def __init__(
        self,
        properties: list[Property] | None = None,
        rooms: list[Room] | None = None,
        inventory: list[InventoryItem] | None = None,
        labor_rules: list[LaborRule] | None = None,
    ) -> None:
        self.properties: dict[int, Property] = {p.id: p for p in properties or []}
        self.rooms: list[Room] = list(rooms or [])
        self.inventory: list[InventoryItem] = list(inventory or [])
        self.labor_rules: list[LaborRule] = list(labor_rules or [])

    async def get_property(self, property_id: int) -> Property | None:
        prop = self.properties.get(property_id)
        return prop.model_copy(deep=True) if prop else None

    async def list_properties(self) -> list[Property]:
        props = sorted(self.properties.values(), key=lambda p: p.name)
        return [p.model_copy(deep=True) for p in props]

    async def get_property_by_code(self, property_code: str) -> Property | None:
        for prop in self.properties.values():
            if prop.property_code == property_code:
                return prop.model_copy(deep=True)
        return None

    async def list_rooms(self, property_id: int) -> list[Room]:
        rooms = [r for r in self.rooms if r.property_id == property_id]
        return [r.model_copy(deep=True) for r in sorted(rooms, key=lambda r: r.name)]

    async def get_room(self, property_id: int, room_name: str) -> Room | None:
        for room in self.rooms:
            if room.property_id == property_id and room.name == room_name:
                return room.model_copy(deep=True)
        return None

    async def list_available_inventory(
        self,
        property_id: int,
        category: str | None = None,
        sub_category: str | None = None,
        search_term: str | None = None,
    ) -> list[InventoryItem]:
        items = [
            i
            for i in self.inventory
            if i.property_id == property_id and i.status == InventoryStatus.AVAILABLE
        ]
        if category:
            items = [i for i in items if i.category == category]
        if sub_category:
            items = [i for i in items if i.sub_category == sub_category]
        if search_term:
            items = [i for i in items if _matches_search(i, search_term)]
        items.sort(key=lambda i: (i.category or "", i.name))
        return [i.model_copy(deep=True) for i in items]

    async def list_labor_rules(self, property_id: int) -> list[LaborRule]:
        return [r.model_copy(deep=True) for r in self.labor_rules if r.property_id == property_id]


class SupabasePropertyRepository:
    """Supabase-backed repository over the properties/rooms/inventory_items/labor_rules tables."""

    def __init__(self, client: AsyncSupabaseClient):
        self.client = client

    async def get_property(self, property_id: int) -> Property | None:
        response = (
            await self.client.table("properties")
            .select("*")
            .eq("id", property_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        if not rows:
            return None
        return Property.model_validate(rows[0])

    async def list_properties(self) -> list[Property]:
        response = await self.client.table("properties").select("*").order("name").execute()
        return [Property.model_validate(row) for row in response.data or []]

    async def get_property_by_code(self, property_code: str) -> Property | None:
        response = (
            await self.client.table("properties")
            .select("*")
            .eq("property_code", property_code)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        if not rows:
            return None
        return Property.model_validate(rows[0])

    async def list_rooms(self, property_id: int) -> list[Room]:
        response = (
            await self.client.table("rooms")
            .select("property_id, name, capacity, dimensions, built_in_av, features")
            .eq("property_id", property_id)
            .order("name")
            .execute()
        )
        return [Room.model_validate(row) for row in response.data or []]

    async def get_room(self, property_id: int, room_name: str) -> Room | None:
        response = (
            await self.client.table("rooms")
            .select("*")
            .eq("property_id", property_id)
            .eq("name", room_name)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        if not rows:
            return None
        return Room.model_validate(rows[0])

    async def list_available_inventory(
        self,
        property_id: int,
        category: str | None = None,
        sub_category: str | None = None,
        search_term: str | None = None,
    ) -> list[InventoryItem]:
        query = (
            self.client.table("inventory_items")
            .select("*")
            .eq("property_id", property_id)
            .eq("status", InventoryStatus.AVAILABLE.value)
        )
        if category:
            query = query.eq("category", category)
        if sub_category:
            query = query.eq("sub_category", sub_category)
        if search_term:
            term = search_term.translate(_POSTGREST_RESERVED).strip()
            if term:
                query = query.or_(f"name.ilike.*{term}*,description.ilike.*{term}*")

        response = await query.order("category").order("name").execute()
        return [InventoryItem.model_validate(row) for row in response.data or []]

    async def list_labor_rules(self, property_id: int) -> list[LaborRule]:
        response = (
            await self.client.table("labor_rules")
            .select("*")
            .eq("property_id", property_id)
            .execute()
        )
        return [LaborRule.model_validate(row) for row in response.data or []]


def summarize_inventory(items: list[InventoryItem]) -> list[InventorySummaryLine]:
    """Group available items by (category, sub_category) with counts and total quantity."""
    groups: dict[tuple[str | None, str | None], list[InventoryItem]] = defaultdict(list)
    for item in items:
        groups[(item.category, item.sub_category)].append(item)

    return [
        InventorySummaryLine(
            category=category,
            sub_category=sub_category,
            count=len(group),
            total_quantity=sum(i.quantity_available for i in group),
        )
        for (category, sub_category), group in sorted(
            groups.items(), key=lambda kv: (kv[0][0] or "", kv[0][1] or "")
        )
    ]


async def get_property_context(
    repository: PropertyRepository, property_id: int
) -> PropertyContext | None:
    """
    Load property, rooms, inventory summary and labor rules in sequence.

    Returns None when the property does not exist.
    """
    prop = await repository.get_property(property_id)
    if prop is None:
        logger.info("property_context_not_found", property_id=property_id)
        return None

    rooms = await repository.list_rooms(property_id)
    inventory = await repository.list_available_inventory(property_id)
    labor_rules = await repository.list_labor_rules(property_id)

    return PropertyContext(
        property=prop,
        rooms=rooms,
        inventory=summarize_inventory(inventory),
        labor_rules=labor_rules,
    )
