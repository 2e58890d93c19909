"""Unit tests for system prompt assembly."""

from eventav.agents.knowledge_base import AV_KNOWLEDGE_BASE
from eventav.agents.prompts import (
    INVENTORY_GUIDANCE,
    NO_INVENTORY_GUIDANCE,
    NO_ROOMS_LINE,
    Inventory,
    NoInventory,
    PromptAssembler,
    format_inventory_line,
    format_room_line,
    inventory_context,
)
from eventav.models.property import InventoryItem, InventoryStatus, Room


def _item(**overrides) -> InventoryItem:
    data = dict(
        property_id=1,
        name="Wireless Handheld Microphone",
        model="Shure ULXD2",
        description="UHF digital handheld mic",
        category="Audio",
        quantity_available=12,
    )
    data.update(overrides)
    return InventoryItem(**data)


class TestInventoryContext:
    def test_empty_list_is_no_inventory(self):
        assert inventory_context([]) == NoInventory()

    def test_only_unavailable_items_is_no_inventory(self):
        items = [_item(status=InventoryStatus.MAINTENANCE)]
        assert isinstance(inventory_context(items), NoInventory)

    def test_available_items_kept_in_order(self):
        first = _item(name="A")
        second = _item(name="B")
        hidden = _item(name="C", status=InventoryStatus.RESERVED)
        context = inventory_context([first, hidden, second])
        assert isinstance(context, Inventory)
        assert [i.name for i in context.items] == ["A", "B"]


class TestLineFormatting:
    def test_room_line_full(self):
        room = Room(
            property_id=1,
            name="Grand Ballroom",
            capacity=500,
            built_in_av="House sound",
            features="Stage",
        )
        assert (
            format_room_line(room)
            == "- Grand Ballroom: Capacity 500 people, Built-in AV: House sound, Features: Stage"
        )

    def test_room_line_omits_missing_optionals(self):
        room = Room(property_id=1, name="Boardroom", capacity=20)
        assert format_room_line(room) == "- Boardroom: Capacity 20 people"

    def test_inventory_line_with_model(self):
        assert (
            format_inventory_line(_item())
            == "- Wireless Handheld Microphone Model Shure ULXD2: 12 units available "
            "(UHF digital handheld mic)"
        )

    def test_inventory_line_without_model(self):
        line = format_inventory_line(_item(name="LED Uplight", model=None, description="RGBW"))
        assert line == "- LED Uplight: 12 units available (RGBW)"


class TestPromptAssembler:
    def test_knowledge_base_comes_first(self):
        assembler = PromptAssembler(AV_KNOWLEDGE_BASE)
        prompt = assembler.build([], NoInventory())
        assert prompt.startswith(AV_KNOWLEDGE_BASE)

    def test_knowledge_base_included_verbatim(self):
        assembler = PromptAssembler("KB: speakers go on stands.")
        prompt = assembler.build([], NoInventory())
        assert prompt.startswith("KB: speakers go on stands.\n\n")

    def test_no_rooms_placeholder(self):
        assembler = PromptAssembler("KB")
        prompt = assembler.build([], NoInventory())
        assert "AVAILABLE ROOMS:\n" + NO_ROOMS_LINE in prompt

    def test_rooms_listed(self):
        assembler = PromptAssembler("KB")
        rooms = [
            Room(property_id=1, name="Boardroom", capacity=20),
            Room(property_id=1, name="Grand Ballroom", capacity=500),
        ]
        prompt = assembler.build(rooms, NoInventory())
        assert "- Boardroom: Capacity 20 people" in prompt
        assert "- Grand Ballroom: Capacity 500 people" in prompt
        assert NO_ROOMS_LINE not in prompt

    def test_no_inventory_branch(self):
        assembler = PromptAssembler("KB")
        prompt = assembler.build([], NoInventory())
        assert NO_INVENTORY_GUIDANCE in prompt
        assert "INVENTORY STATUS: No inventory data" in prompt
        assert "AVAILABLE EQUIPMENT INVENTORY" not in prompt

    def test_inventory_branch_lists_items(self):
        assembler = PromptAssembler("KB")
        prompt = assembler.build([], Inventory(items=(_item(),)))
        assert "AVAILABLE EQUIPMENT INVENTORY:\n- Wireless Handheld Microphone Model Shure ULXD2" in prompt
        assert INVENTORY_GUIDANCE in prompt
        assert "INVENTORY STATUS: No inventory data" not in prompt

    def test_room_function_guidance_present(self):
        prompt = PromptAssembler("KB").build([], NoInventory())
        assert "check_room_capabilities" in prompt
