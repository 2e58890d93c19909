"""Unit tests for the model-callable functions and their dispatcher."""

import json
from unittest.mock import AsyncMock

import pytest

from eventav.agents.tools import FUNCTION_CATALOG, FunctionExecutors, FunctionName
from eventav.models.property import LaborRule
from eventav.services.property_repository import InMemoryPropertyRepository


@pytest.fixture
def executors(repository: InMemoryPropertyRepository) -> FunctionExecutors:
    return FunctionExecutors(repository)


class TestFunctionCatalog:
    def test_catalog_matches_enum(self):
        assert [f["name"] for f in FUNCTION_CATALOG] == [n.value for n in FunctionName]

    def test_required_arguments(self):
        by_name = {f["name"]: f for f in FUNCTION_CATALOG}
        assert by_name["fetch_inventory"]["parameters"]["required"] == []
        assert by_name["check_room_capabilities"]["parameters"]["required"] == ["room_name"]
        assert by_name["validate_order"]["parameters"]["required"] == [
            "equipment_list",
            "attendees",
            "event_duration",
        ]

    def test_property_id_never_a_parameter(self):
        for function in FUNCTION_CATALOG:
            assert "property_id" not in function["parameters"]["properties"]


class TestDispatch:
    async def test_unknown_function(self, executors):
        result = await executors.execute("book_room", "{}", 1)
        assert result == {"error": "Unknown function: book_room"}

    async def test_invalid_json_arguments(self, executors):
        result = await executors.execute("fetch_inventory", "{not json", 1)
        assert result["error"].startswith("Invalid JSON arguments")

    async def test_invalid_argument_shape(self, executors):
        result = await executors.execute("check_room_capabilities", json.dumps({}), 1)
        assert result["error"].startswith("Invalid arguments for check_room_capabilities")

    async def test_missing_arguments_treated_as_empty(self, executors):
        result = await executors.execute("fetch_inventory", None, 1)
        assert result["total_items"] == 3

    async def test_executor_exception_becomes_error_result(self):
        repo = AsyncMock()
        repo.list_available_inventory.side_effect = RuntimeError("connection reset")
        result = await FunctionExecutors(repo).execute("fetch_inventory", "{}", 1)
        assert result == {"error": "connection reset"}


class TestFetchInventory:
    async def test_scoped_to_request_property(self, executors):
        result = await executors.execute("fetch_inventory", "{}", 1)
        names = [i["name"] for i in result["items"]]
        assert "Line Array Speaker" not in names
        assert "Broken Mixer" not in names
        assert result["total_items"] == len(result["items"])

    async def test_property_id_in_arguments_is_ignored(self, executors):
        result = await executors.execute("fetch_inventory", json.dumps({"property_id": 2}), 1)
        assert "Line Array Speaker" not in [i["name"] for i in result["items"]]

    async def test_category_filter(self, executors):
        result = await executors.execute("fetch_inventory", json.dumps({"category": "Video"}), 1)
        assert [i["name"] for i in result["items"]] == ["Laser Projector"]

    async def test_search_term_matches_description(self, executors):
        result = await executors.execute(
            "fetch_inventory", json.dumps({"search_term": "rgbw"}), 1
        )
        assert [i["name"] for i in result["items"]] == ["LED Uplight"]

    async def test_item_fields(self, executors):
        result = await executors.execute("fetch_inventory", json.dumps({"category": "Video"}), 1)
        assert set(result["items"][0]) == {
            "name",
            "description",
            "category",
            "sub_category",
            "quantity_available",
            "model",
            "manufacturer",
        }


class TestCheckRoomCapabilities:
    async def test_room_not_found(self, executors):
        result = await executors.execute(
            "check_room_capabilities", json.dumps({"room_name": "Atrium"}), 1
        )
        assert result == {"compatible": False, "reason": "Room not found"}

    async def test_room_of_other_property_not_found(self, executors):
        result = await executors.execute(
            "check_room_capabilities", json.dumps({"room_name": "Rooftop Terrace"}), 1
        )
        assert result["compatible"] is False

    async def test_no_equipment_note(self, executors):
        result = await executors.execute(
            "check_room_capabilities", json.dumps({"room_name": "Boardroom"}), 1
        )
        assert result["compatible"] is True
        assert result["room_info"]["capacity"] == 20
        assert "property_id" not in result["room_info"]
        assert result["equipment_notes"] == [
            "No specific equipment provided for compatibility check"
        ]

    async def test_notes_for_missing_builtins(self, executors):
        args = {"room_name": "Boardroom", "equipment_list": ["Laser Projector", "Audio mixer"]}
        result = await executors.execute("check_room_capabilities", json.dumps(args), 1)
        assert result["equipment_notes"] == [
            "Laser Projector: No built-in projection, will need portable setup",
            "Audio mixer: No built-in audio, will need full audio setup",
        ]

    async def test_no_notes_when_room_has_builtins(self, executors):
        args = {"room_name": "Grand Ballroom", "equipment_list": ["Projector", "Audio package"]}
        result = await executors.execute("check_room_capabilities", json.dumps(args), 1)
        assert result["compatible"] is True
        assert result["equipment_notes"] == []


class TestValidateOrder:
    async def test_returns_validation_dict(self, executors):
        args = {
            "equipment_list": [{"item_name": "Laser Projector", "quantity": 4}],
            "attendees": 50,
            "event_duration": 3,
        }
        result = await executors.execute("validate_order", json.dumps(args), 1)
        assert result["valid"] is False
        assert result["errors"] == [
            "Insufficient inventory for Laser Projector: requested 4, available 3"
        ]
        assert set(result["details"]) == {"inventory_check", "room_check", "labor_check"}


class TestCalculateLaborRequirements:
    async def test_default_rules(self, executors):
        args = {
            "equipment_list": [{"category": "Audio"}, {"category": "Video"}],
            "attendees": 120,
            "event_duration": 2,
        }
        result = await executors.execute("calculate_labor_requirements", json.dumps(args), 1)
        assert result["required_technicians"] == 3
        assert result["total_labor_hours"] == 19.5

    async def test_invalid_rule_is_an_error(self):
        repo = InMemoryPropertyRepository(
            labor_rules=[LaborRule(property_id=1, rule_type="setup_time", rule_data="nope")]
        )
        args = {"equipment_list": [], "attendees": 10, "event_duration": 1}
        result = await FunctionExecutors(repo).execute(
            "calculate_labor_requirements", json.dumps(args), 1
        )
        assert result == {"error": "Invalid labor rule format for setup_time"}
