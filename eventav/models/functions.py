"""
Argument and result models for the functions exposed to the model.

Arguments arrive as JSON produced by the model and are validated here before
any executor touches the database. The property id is never part of these
models: executors receive it separately from the request.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Arguments
# ---------------------------------------------------------------------------


class FetchInventoryArgs(BaseModel):
    category: str | None = None
    sub_category: str | None = None
    search_term: str | None = None


class CheckRoomCapabilitiesArgs(BaseModel):
    room_name: str
    equipment_list: list[str] = Field(default_factory=list)


class OrderLine(BaseModel):
    """One requested equipment line of an order."""

    item_name: str | None = None
    quantity: int = Field(default=1, ge=0)
    category: str | None = None


class ValidateOrderArgs(BaseModel):
    equipment_list: list[OrderLine]
    attendees: int = Field(ge=0)
    event_duration: float = Field(ge=0)


class LaborLine(BaseModel):
    """One equipment line that needs setup labor."""

    category: str = ""
    quantity: int = Field(default=1, ge=0)


class CalculateLaborArgs(BaseModel):
    equipment_list: list[LaborLine]
    attendees: int = Field(ge=0)
    event_duration: float = Field(ge=0)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class LaborSchedule(BaseModel):
    setup_start: str
    event_support: str
    breakdown: str


class LaborRequirements(BaseModel):
    """Output of calculate_labor_requirements."""

    required_technicians: int
    setup_time_hours: float
    event_duration_hours: float
    breakdown_time_hours: float
    total_labor_hours: float
    labor_schedule: LaborSchedule


class InventoryLineCheck(BaseModel):
    item_name: str | None
    requested: int
    available: int
    sufficient: bool
    matching_items: list[dict] = Field(default_factory=list)


class CheckSection(BaseModel):
    passed: bool = True
    details: dict | None = None


class InventoryCheckSection(BaseModel):
    passed: bool = True
    items: list[InventoryLineCheck] = Field(default_factory=list)


class ValidationDetails(BaseModel):
    inventory_check: InventoryCheckSection = Field(default_factory=InventoryCheckSection)
    room_check: CheckSection = Field(default_factory=CheckSection)
    labor_check: CheckSection = Field(default_factory=CheckSection)


class OrderValidation(BaseModel):
    """Output of validate_order."""

    valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    details: ValidationDetails = Field(default_factory=ValidationDetails)
