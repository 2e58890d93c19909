"""
Functions exposed to the model, and the executors behind them.

  fetch_inventory               — available equipment, filtered
  check_room_capabilities       — room details + equipment advisory notes
  validate_order                — stock / capacity / labor checks
  calculate_labor_requirements  — technicians and labor hours

FUNCTION_CATALOG is the JSON-schema declaration sent to the model and is only
a serialization boundary: dispatch goes through the FunctionName enum and the
FunctionExecutors table. Every executor takes the property id from the
request, never from the model's arguments, and never writes.
"""

import json
from enum import Enum
from typing import Any, Awaitable, Callable

import structlog
from pydantic import BaseModel, ValidationError

from eventav.constants import (
    NO_EQUIPMENT_NOTE,
    ROOM_CAPABILITY_RULES,
    ROOM_NOT_FOUND_REASON,
)
from eventav.models.functions import (
    CalculateLaborArgs,
    CheckRoomCapabilitiesArgs,
    FetchInventoryArgs,
    ValidateOrderArgs,
)
from eventav.services.labor_calculator import calculate_labor, parse_labor_rules
from eventav.services.order_validation import validate_order
from eventav.services.property_repository import PropertyRepository

logger = structlog.get_logger(__name__)


class FunctionName(str, Enum):
    FETCH_INVENTORY = "fetch_inventory"
    CHECK_ROOM_CAPABILITIES = "check_room_capabilities"
    VALIDATE_ORDER = "validate_order"
    CALCULATE_LABOR_REQUIREMENTS = "calculate_labor_requirements"


FUNCTION_CATALOG: list[dict[str, Any]] = [
    {
        "name": FunctionName.FETCH_INVENTORY.value,
        "description": "Get detailed inventory information for specific categories or items",
        "parameters": {
            "type": "object",
            "properties": {
                "category": {
                    "type": "string",
                    "description": 'Equipment category to search for (e.g., "Audio", "Video", "Lighting")',
                },
                "sub_category": {
                    "type": "string",
                    "description": 'Equipment sub-category to search for (e.g., "Microphones", "Projectors")',
                },
                "search_term": {
                    "type": "string",
                    "description": "Search term matched against item names and descriptions",
                },
            },
            "required": [],
        },
    },
    {
        "name": FunctionName.CHECK_ROOM_CAPABILITIES.value,
        "description": (
            "Get detailed room information and check equipment compatibility. Use this "
            "whenever a user mentions a specific room name or asks about room details."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "room_name": {"type": "string", "description": "Name of the room to check"},
                "equipment_list": {
                    "type": "array",
                    "description": "List of equipment to check compatibility (can be empty to just get room info)",
                    "items": {"type": "string"},
                },
            },
            "required": ["room_name"],
        },
    },
    {
        "name": FunctionName.VALIDATE_ORDER.value,
        "description": "Validate an event order against inventory, room capacity and labor rules",
        "parameters": {
            "type": "object",
            "properties": {
                "equipment_list": {
                    "type": "array",
                    "description": "List of equipment with quantities",
                    "items": {
                        "type": "object",
                        "properties": {
                            "item_name": {"type": "string"},
                            "quantity": {"type": "integer"},
                            "category": {"type": "string"},
                        },
                    },
                },
                "attendees": {"type": "integer", "description": "Number of event attendees"},
                "event_duration": {"type": "number", "description": "Event duration in hours"},
            },
            "required": ["equipment_list", "attendees", "event_duration"],
        },
    },
    {
        "name": FunctionName.CALCULATE_LABOR_REQUIREMENTS.value,
        "description": "Calculate labor requirements based on equipment and event details",
        "parameters": {
            "type": "object",
            "properties": {
                "equipment_list": {
                    "type": "array",
                    "description": "List of equipment requiring setup",
                    "items": {
                        "type": "object",
                        "properties": {
                            "category": {"type": "string"},
                            "quantity": {"type": "integer"},
                        },
                    },
                },
                "attendees": {"type": "integer", "description": "Number of event attendees"},
                "event_duration": {"type": "number", "description": "Event duration in hours"},
            },
            "required": ["equipment_list", "attendees", "event_duration"],
        },
    },
]


Executor = Callable[[Any, int], Awaitable[dict[str, Any]]]


def _err(message: str) -> dict[str, Any]:
    return {"error": message}


class FunctionExecutors:
    """Typed dispatch table from FunctionName to executor coroutine."""

    def __init__(self, repository: PropertyRepository):
        self.repository = repository
        self._table: dict[FunctionName, tuple[type[BaseModel], Executor]] = {
            FunctionName.FETCH_INVENTORY: (FetchInventoryArgs, self.fetch_inventory),
            FunctionName.CHECK_ROOM_CAPABILITIES: (
                CheckRoomCapabilitiesArgs,
                self.check_room_capabilities,
            ),
            FunctionName.VALIDATE_ORDER: (ValidateOrderArgs, self.validate_order),
            FunctionName.CALCULATE_LABOR_REQUIREMENTS: (
                CalculateLaborArgs,
                self.calculate_labor_requirements,
            ),
        }

    async def execute(self, name: str, raw_arguments: str | None, property_id: int) -> dict[str, Any]:
        """
        Run one model-requested function. Never raises: every failure
        (unknown name, bad JSON, invalid arguments, DB error) comes back
        as {"error": message} so the model can react to it.
        """
        try:
            function = FunctionName(name)
        except ValueError:
            logger.warning("function_unknown", function=name)
            return _err(f"Unknown function: {name}")

        try:
            arguments = json.loads(raw_arguments or "{}")
        except json.JSONDecodeError as e:
            logger.warning("function_arguments_invalid_json", function=name, error=str(e))
            return _err(f"Invalid JSON arguments: {e}")

        args_model, executor = self._table[function]
        try:
            args = args_model.model_validate(arguments)
        except ValidationError as e:
            logger.warning("function_arguments_invalid", function=name, error=str(e))
            return _err(f"Invalid arguments for {name}: {e}")

        logger.info("function_call_executing", function=name, arguments=arguments)
        try:
            return await executor(args, property_id)
        except Exception as e:
            logger.exception("function_call_failed", function=name, property_id=property_id)
            return _err(str(e))

    async def fetch_inventory(self, args: FetchInventoryArgs, property_id: int) -> dict[str, Any]:
        items = await self.repository.list_available_inventory(
            property_id,
            category=args.category,
            sub_category=args.sub_category,
            search_term=args.search_term,
        )
        return {
            "items": [
                item.model_dump(
                    include={
                        "name",
                        "description",
                        "category",
                        "sub_category",
                        "quantity_available",
                        "model",
                        "manufacturer",
                    }
                )
                for item in items
            ],
            "total_items": len(items),
        }

    async def check_room_capabilities(
        self, args: CheckRoomCapabilitiesArgs, property_id: int
    ) -> dict[str, Any]:
        room = await self.repository.get_room(property_id, args.room_name)
        if room is None:
            return {"compatible": False, "reason": ROOM_NOT_FOUND_REASON}

        room_text = f"{room.built_in_av or ''} {room.features or ''}".lower()
        notes: list[str] = []
        if args.equipment_list:
            for equipment in args.equipment_list:
                lowered = equipment.lower()
                for keyword, room_keyword, note in ROOM_CAPABILITY_RULES:
                    if keyword in lowered and room_keyword not in room_text:
                        notes.append(f"{equipment}: {note}")
        else:
            notes.append(NO_EQUIPMENT_NOTE)

        return {
            "compatible": True,
            "room_info": room.model_dump(exclude={"property_id"}),
            "equipment_notes": notes,
        }

    async def validate_order(self, args: ValidateOrderArgs, property_id: int) -> dict[str, Any]:
        result = await validate_order(self.repository, property_id, args)
        return result.model_dump()

    async def calculate_labor_requirements(
        self, args: CalculateLaborArgs, property_id: int
    ) -> dict[str, Any]:
        rules, invalid = parse_labor_rules(await self.repository.list_labor_rules(property_id))
        if invalid:
            raise ValueError(f"Invalid labor rule format for {', '.join(invalid)}")
        result = calculate_labor(args.equipment_list, args.attendees, args.event_duration, rules)
        return result.model_dump()
