"""
Deterministic labor calculator for event AV setups.

Pure function: calculate_labor(equipment, attendees, event_duration, rules) -> LaborRequirements.
No model calls; derives staffing from the property's labor_rules rows, falling
back to DEFAULT_TECHNICIAN_RATIO / DEFAULT_SETUP_TIMES when a rule type is absent.

    required_technicians = max(minimum_techs, ceil(attendees / attendees_per_tech))
    setup_time_hours     = Σ per-line setup constant (audio → video → lighting, first match)
    total_labor_hours    = (setup + event_duration + breakdown) × required_technicians
"""

import math
from typing import Any

import structlog

from eventav.constants import (
    DEFAULT_SETUP_TIMES,
    DEFAULT_TECHNICIAN_RATIO,
    RULE_SETUP_TIME,
    RULE_TECHNICIAN_RATIO,
    SETUP_CATEGORY_ORDER,
)
from eventav.models.functions import LaborLine, LaborRequirements, LaborSchedule
from eventav.models.property import LaborRule

logger = structlog.get_logger(__name__)


def parse_labor_rules(rules: list[LaborRule]) -> tuple[dict[str, dict[str, Any]], list[str]]:
    """
    Parse every rule's JSON blob, keyed by rule_type.

    Returns:
        (parsed rules, rule types whose blob could not be parsed)
    """
    parsed: dict[str, dict[str, Any]] = {}
    invalid: list[str] = []
    for rule in rules:
        try:
            parsed[rule.rule_type] = rule.parameters()
        except ValueError:
            logger.warning("labor_rule_invalid", rule_type=rule.rule_type)
            invalid.append(rule.rule_type)
    return parsed, invalid


def required_technicians(attendees: int, ratio: dict[str, Any]) -> int:
    """
    Technicians needed for a head count under a technician_ratio rule.

    Keys missing from the rule take their default; keys present are used
    as-is, so minimum_techs = 0 is honoured.

    Raises:
        ValueError: attendees_per_tech is not positive.
    """
    merged = {**DEFAULT_TECHNICIAN_RATIO, **ratio}
    per_tech = merged["attendees_per_tech"]
    minimum = merged["minimum_techs"]
    if per_tech <= 0:
        raise ValueError("attendees_per_tech must be positive")
    return int(max(minimum, math.ceil(attendees / per_tech)))


def setup_hours_for(category: str, setup_times: dict[str, Any]) -> float:
    """Setup constant for one equipment line; 0 when no category family matches."""
    lowered = category.lower()
    for keyword, key in SETUP_CATEGORY_ORDER:
        if keyword in lowered:
            return float(setup_times.get(key) or DEFAULT_SETUP_TIMES[key])
    return 0.0


def calculate_labor(
    equipment: list[LaborLine],
    attendees: int,
    event_duration: float,
    rules: dict[str, dict[str, Any]],
) -> LaborRequirements:
    """
    Compute technician count, setup/breakdown hours and total labor hours.

    Args:
        equipment:      Equipment lines needing setup (only category matters).
        attendees:      Expected head count.
        event_duration: Event length in hours.
        rules:          Parsed labor rules keyed by rule_type.

    Returns:
        LaborRequirements with a human-readable schedule summary.
    """
    ratio = {**DEFAULT_TECHNICIAN_RATIO, **rules.get(RULE_TECHNICIAN_RATIO, {})}
    setup_times = {**DEFAULT_SETUP_TIMES, **rules.get(RULE_SETUP_TIME, {})}

    techs = required_technicians(attendees, ratio)
    setup_total = sum(setup_hours_for(line.category, setup_times) for line in equipment)
    breakdown = float(setup_times.get("breakdown") or DEFAULT_SETUP_TIMES["breakdown"])
    total_hours = (setup_total + event_duration + breakdown) * techs

    return LaborRequirements(
        required_technicians=techs,
        setup_time_hours=setup_total,
        event_duration_hours=event_duration,
        breakdown_time_hours=breakdown,
        total_labor_hours=total_hours,
        labor_schedule=LaborSchedule(
            setup_start=f"{setup_total:g} hours before event",
            event_support=f"{techs} technicians during event",
            breakdown=f"{breakdown:g} hours after event",
        ),
    )
