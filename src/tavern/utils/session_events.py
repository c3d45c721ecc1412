"""Session event helpers.

Session events are the GM's running log of what happened at the table: HP
and XP changes, conditions, loot, quest and downtime updates, free notes.
Each event has a ``type`` plus a free-form ``data`` payload; this module
turns them into the one-line text players see.
"""

from typing import Any, Dict, Optional

EVENT_HP_CHANGE = "hp_change"
EVENT_XP_GAIN = "xp_gain"
EVENT_CONDITION_ADD = "condition_add"
EVENT_CONDITION_REMOVE = "condition_remove"
EVENT_NOTE = "note"
EVENT_LOOT = "loot"
EVENT_QUEST_UPDATE = "quest_update"
EVENT_DOWNTIME_START = "downtime_start"
EVENT_DOWNTIME_ADVANCE = "downtime_advance"
EVENT_DOWNTIME_COMPLETE = "downtime_complete"
EVENT_DOWNTIME_CANCEL = "downtime_cancel"


def _signed(value: Any) -> str:
    if isinstance(value, (int, float)) and value > 0:
        return f"+{value}"
    return str(value)


def _now(data: Dict[str, Any]) -> str:
    current = data.get("current")
    return f" (now {current})" if current is not None else ""


def humanize_event(
    event_type: Optional[str],
    data: Optional[Dict[str, Any]] = None,
    message: Optional[str] = None,
) -> str:
    """Render an event as a short line of text.

    Unknown types fall back to the message, then the type itself.
    """
    data = data or {}
    message = message or ""

    if event_type == EVENT_HP_CHANGE:
        if data.get("delta") is not None:
            return f"HP {_signed(data['delta'])}{_now(data)}"
        return message or "HP change"
    if event_type in (EVENT_XP_GAIN, "xp_change"):
        if data.get("amount") is not None:
            return f"Gained {data['amount']} XP{_now(data)}"
        return message or "XP change"
    if event_type == EVENT_CONDITION_ADD:
        return f"Gained condition: {data.get('condition') or message or 'Unknown'}"
    if event_type == EVENT_CONDITION_REMOVE:
        return f"Removed condition: {data.get('condition') or message or 'Unknown'}"
    if event_type == EVENT_NOTE:
        return data.get("text") or message or "GM note"
    if event_type in (EVENT_LOOT, "loot_gain"):
        item = data.get("item") or message or "Unknown"
        amount = f" x{data['amount']}" if data.get("amount") else ""
        return f"Loot: {item}{amount}"
    if event_type == EVENT_QUEST_UPDATE:
        return (
            f"Quest update: {data.get('title') or 'Unknown'}"
            f" -> {data.get('status') or 'Updated'}"
        )

    title = data.get("title") or "Activity"
    if event_type in (EVENT_DOWNTIME_START, "downtime_create"):
        return f"Started downtime: {title}"
    if event_type == EVENT_DOWNTIME_ADVANCE:
        if data.get("progress") is not None:
            return f"Advanced downtime: {title} ({data['progress']})"
        return f"Advanced downtime: {title}"
    if event_type == EVENT_DOWNTIME_COMPLETE:
        return f"Completed downtime: {title}"
    if event_type == EVENT_DOWNTIME_CANCEL:
        return f"Cancelled downtime: {title}"

    return message or event_type or "Event"
