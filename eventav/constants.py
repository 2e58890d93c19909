"""
Business logic constants for the Event AV assistant.

These values are stable across environments (dev/staging/prod) and do not
need env-var overrides. For operational parameters that vary per environment
(model, temperature, max_tokens, function-call ceiling), see config.py.
"""

API_TITLE = "Event AV Assistant API"
API_VERSION = "0.1.0"

# --- Labor rule keys (labor_rules.rule_type) ---
RULE_TECHNICIAN_RATIO = "technician_ratio"
RULE_SETUP_TIME = "setup_time"
RULE_UNION_REQUIREMENTS = "union_requirements"

# --- Defaults applied when a property has no rule of that type ---
DEFAULT_TECHNICIAN_RATIO: dict[str, float] = {
    "attendees_per_tech": 50,
    "minimum_techs": 1,
}

# Hours per equipment line, by category family, plus one breakdown block
DEFAULT_SETUP_TIMES: dict[str, float] = {
    "audio_setup": 2,
    "video_setup": 1.5,
    "lighting_setup": 3,
    "breakdown": 1,
}

# Category substring → setup_time key. Checked in this order; first match wins.
SETUP_CATEGORY_ORDER: tuple[tuple[str, str], ...] = (
    ("audio", "audio_setup"),
    ("video", "video_setup"),
    ("lighting", "lighting_setup"),
)

# --- Room capability heuristics ---
# (equipment keyword, room keyword that satisfies it, advisory note suffix)
ROOM_CAPABILITY_RULES: tuple[tuple[str, str, str], ...] = (
    ("projector", "projection", "No built-in projection, will need portable setup"),
    ("audio", "sound", "No built-in audio, will need full audio setup"),
)
NO_EQUIPMENT_NOTE = "No specific equipment provided for compatibility check"
ROOM_NOT_FOUND_REASON = "Room not found"

# --- Chat attachments ---
# Fixed instructions appended to the user turn that carries an attachment
IMAGE_ANALYSIS_INSTRUCTIONS = (
    "Please analyze the attached image. If it shows a room, stage, floor plan or "
    "equipment, describe what you see and recommend AV equipment from our "
    "available inventory that fits the space."
)
DOCUMENT_ANALYSIS_INSTRUCTIONS = (
    "Please review the document above. Extract any event requirements "
    "(attendee count, schedule, rooms, equipment requests) and recommend AV "
    "equipment from our available inventory."
)

# --- Migration ---
# Copy order respects foreign keys (parents first)
MIGRATION_TABLES: tuple[str, ...] = (
    "properties",
    "rooms",
    "inventory_items",
    "labor_rules",
    "unions",
    "union_schedules",
    "chat_sessions",
    "event_orders",
)
