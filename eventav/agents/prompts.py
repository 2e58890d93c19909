"""
System prompt assembly for the chat orchestrator.

The prompt is rebuilt on every request from three parts, in this order:

1. The static knowledge base, verbatim
2. The property's rooms
3. One of two inventory branches:
   - NoInventory:  no equipment may be recommended by name; generic AV
                   consultation only
   - Inventory:    itemized available equipment; recommendations must use
                   the exact names and models listed

The inventory branch is a tagged value so each prompt shape can be built and
tested on its own.
"""

from dataclasses import dataclass, field

from eventav.models.property import InventoryItem, InventoryStatus, Room

ASSISTANT_IDENTITY = (
    "You are an AI assistant for an event AV rental service at the selected property."
)

ROOM_FUNCTION_GUIDANCE = (
    "IMPORTANT: When users mention a specific room name, use the check_room_capabilities "
    "function to provide detailed room information and assess equipment compatibility."
)

NO_INVENTORY_GUIDANCE = """\
INVENTORY STATUS: No inventory data has been uploaded for this property yet.

You may NOT recommend specific equipment items, brands or models, and you must not \
call fetch_inventory or validate_order. You may still give general AV consultation \
(what kinds of equipment an event of this size typically needs, room considerations, \
labor expectations) using the knowledge base above.

Let the user know that inventory data needs to be uploaded by an administrator \
through the admin interface before specific equipment recommendations are possible."""

INVENTORY_GUIDANCE = """\
IMPORTANT: When recommending equipment, always use the EXACT item names and model \
numbers from this inventory list. Only recommend equipment that is actually available \
in the inventory above. Use fetch_inventory for detailed lookups, validate_order to \
confirm quantities, and calculate_labor_requirements to estimate technicians and hours."""

NO_ROOMS_LINE = "- No rooms configured yet"


@dataclass(frozen=True)
class NoInventory:
    """The property has no available inventory."""


@dataclass(frozen=True)
class Inventory:
    """The property's available inventory, in display order."""

    items: tuple[InventoryItem, ...] = field(default_factory=tuple)


InventoryContext = NoInventory | Inventory


def inventory_context(items: list[InventoryItem]) -> InventoryContext:
    """Pick the prompt branch for a list of items. Non-available items are dropped."""
    available = tuple(i for i in items if i.status == InventoryStatus.AVAILABLE)
    if not available:
        return NoInventory()
    return Inventory(items=available)


def format_room_line(room: Room) -> str:
    line = f"- {room.name}: Capacity {room.capacity} people"
    if room.built_in_av:
        line += f", Built-in AV: {room.built_in_av}"
    if room.features:
        line += f", Features: {room.features}"
    return line


def format_inventory_line(item: InventoryItem) -> str:
    name = f"{item.name} Model {item.model}" if item.model else item.name
    return f"- {name}: {item.quantity_available} units available ({item.description or ''})"


class PromptAssembler:
    """Builds the system-role instruction text for one property."""

    def __init__(self, knowledge_base: str):
        self.knowledge_base = knowledge_base

    def rooms_section(self, rooms: list[Room]) -> str:
        lines = [format_room_line(r) for r in rooms] or [NO_ROOMS_LINE]
        return "AVAILABLE ROOMS:\n" + "\n".join(lines)

    def inventory_section(self, inventory: InventoryContext) -> str:
        match inventory:
            case Inventory(items=items):
                listing = "\n".join(format_inventory_line(i) for i in items)
                return f"AVAILABLE EQUIPMENT INVENTORY:\n{listing}\n\n{INVENTORY_GUIDANCE}"
            case NoInventory():
                return NO_INVENTORY_GUIDANCE
        raise TypeError(f"Unknown inventory context: {inventory!r}")

    def build(self, rooms: list[Room], inventory: InventoryContext) -> str:
        """Return the full system prompt. The knowledge base always comes first."""
        sections = [
            self.knowledge_base,
            ASSISTANT_IDENTITY,
            self.rooms_section(rooms),
            self.inventory_section(inventory),
            ROOM_FUNCTION_GUIDANCE,
        ]
        return "\n\n".join(sections)
