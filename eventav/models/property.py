"""
Data models for venue properties.
These models mirror the rows of the properties, rooms, inventory_items and
labor_rules tables. The chat core only ever reads them.
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class InventoryStatus(str, Enum):
    """Lifecycle status of an inventory item. Only AVAILABLE is ever shown to the model."""

    AVAILABLE = "available"
    MAINTENANCE = "maintenance"
    RESERVED = "reserved"
    OUT_OF_SERVICE = "out_of_service"


class Property(BaseModel):
    """A venue owning its own rooms, inventory and labor rules."""

    id: int
    name: str
    property_code: str | None = None
    location: str | None = None
    description: str | None = None
    contact_info: str | None = None


class Room(BaseModel):
    """A bookable room inside a property."""

    property_id: int
    name: str
    capacity: int | None = None
    dimensions: str | None = None
    built_in_av: str | None = None
    features: str | None = None


class InventoryItem(BaseModel):
    """A rentable piece of AV equipment held by a property."""

    property_id: int
    name: str
    model: str | None = None
    manufacturer: str | None = None
    description: str | None = None
    category: str | None = None
    sub_category: str | None = None
    quantity_available: int = Field(default=0, ge=0)
    status: InventoryStatus = InventoryStatus.AVAILABLE


class LaborRule(BaseModel):
    """A labor rule row. rule_data holds a serialized JSON parameter blob."""

    property_id: int
    rule_type: str
    rule_data: str
    description: str | None = None

    def parameters(self) -> dict[str, Any]:
        """Parse rule_data. Raises ValueError when the blob is not a JSON object."""
        data = json.loads(self.rule_data)
        if not isinstance(data, dict):
            raise ValueError(f"Labor rule '{self.rule_type}' must be a JSON object")
        return data


class InventorySummaryLine(BaseModel):
    """Available inventory aggregated per category / sub-category."""

    category: str | None = None
    sub_category: str | None = None
    count: int
    total_quantity: int


class PropertyContext(BaseModel):
    """Everything the assistant knows about one property, in one payload."""

    property: Property
    rooms: list[Room] = Field(default_factory=list)
    inventory: list[InventorySummaryLine] = Field(default_factory=list)
    labor_rules: list[LaborRule] = Field(default_factory=list)
