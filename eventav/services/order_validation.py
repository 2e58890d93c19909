"""
Event order validation against a property's inventory, rooms and labor rules.

Three independent checks, all reported together:
  inventory_check — every requested line has enough available stock
                    (an item matches a line by exact name or by category)
  room_check      — at least one room seats the attendee count
  labor_check     — technician requirement from the technician_ratio rule

Labor rules whose JSON blob cannot be parsed, and events longer than the
union overtime threshold, produce warnings rather than errors.
"""

import structlog

from eventav.constants import RULE_TECHNICIAN_RATIO, RULE_UNION_REQUIREMENTS
from eventav.models.functions import (
    InventoryLineCheck,
    OrderLine,
    OrderValidation,
    ValidateOrderArgs,
)
from eventav.models.property import InventoryItem
from eventav.services.labor_calculator import parse_labor_rules, required_technicians
from eventav.services.property_repository import PropertyRepository

logger = structlog.get_logger(__name__)


def _check_line(line: OrderLine, inventory: list[InventoryItem]) -> InventoryLineCheck:
    matching = [
        item
        for item in inventory
        if (line.item_name and item.name == line.item_name)
        or (line.category and item.category == line.category)
    ]
    available = sum(item.quantity_available for item in matching)
    return InventoryLineCheck(
        item_name=line.item_name,
        requested=line.quantity,
        available=available,
        sufficient=available >= line.quantity,
        matching_items=[
            {"name": item.name, "available": item.quantity_available, "model": item.model}
            for item in matching
        ],
    )


async def validate_order(
    repository: PropertyRepository,
    property_id: int,
    args: ValidateOrderArgs,
) -> OrderValidation:
    """
    Validate an order for one property.

    Repository failures propagate to the caller.
    """
    result = OrderValidation()

    # 1. Inventory availability
    inventory = await repository.list_available_inventory(property_id)
    for line in args.equipment_list:
        check = _check_line(line, inventory)
        result.details.inventory_check.items.append(check)
        if not check.sufficient:
            result.valid = False
            result.details.inventory_check.passed = False
            result.errors.append(
                f"Insufficient inventory for {line.item_name or line.category}: "
                f"requested {check.requested}, available {check.available}"
            )

    # 2. Room capacity
    if args.attendees:
        rooms = sorted(
            await repository.list_rooms(property_id), key=lambda r: r.capacity or 0
        )
        suitable = [r for r in rooms if (r.capacity or 0) >= args.attendees]
        result.details.room_check.details = {
            "attendees": args.attendees,
            "suitable_rooms": len(suitable),
            "rooms_available": [
                {"name": r.name, "capacity": r.capacity, "built_in_av": r.built_in_av}
                for r in suitable
            ],
        }
        if not suitable:
            largest = max((r.capacity or 0 for r in rooms), default=0)
            result.valid = False
            result.details.room_check.passed = False
            result.errors.append(
                f"No rooms available for {args.attendees} attendees. "
                f"Largest available room has capacity {largest}"
            )

    # 3. Labor rules
    rules, invalid = parse_labor_rules(await repository.list_labor_rules(property_id))
    for rule_type in invalid:
        result.warnings.append(f"Invalid labor rule format for {rule_type}")

    ratio = rules.get(RULE_TECHNICIAN_RATIO)
    if ratio and args.attendees:
        try:
            techs = required_technicians(args.attendees, ratio)
        except ValueError:
            result.warnings.append(f"Invalid labor rule format for {RULE_TECHNICIAN_RATIO}")
        else:
            result.details.labor_check.details = {
                "required_technicians": techs,
                "based_on_attendees": args.attendees,
                "ratio": ratio.get("attendees_per_tech"),
            }

    union = rules.get(RULE_UNION_REQUIREMENTS) or {}
    overtime_threshold = union.get("overtime_threshold")
    if overtime_threshold is not None and args.event_duration > overtime_threshold:
        result.warnings.append(
            f"Event duration ({args.event_duration:g}h) exceeds overtime threshold "
            f"({overtime_threshold}h). Additional costs may apply."
        )

    logger.info(
        "order_validation_completed",
        property_id=property_id,
        valid=result.valid,
        errors=len(result.errors),
        warnings=len(result.warnings),
    )
    return result
