"""
Action Markers

The three marker keys that route an action into the orchestrator, plus
helpers to build marked actions and to derive follow-up actions from them.
"""

from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional


class ApiMarker(str, Enum):
    """Marker keys recognized by the API middleware"""
    CALL_API = "api/CALL_API"
    CHAIN_API = "api/CHAIN_API"
    CONCURRENT_API = "api/CONCURRENT_API"

    # Hash like the plain string so members and their values are
    # interchangeable as dict keys
    def __hash__(self):
        return str.__hash__(self)

    def __str__(self):
        return str.__str__(self)


CALL_API = ApiMarker.CALL_API
CHAIN_API = ApiMarker.CHAIN_API
CONCURRENT_API = ApiMarker.CONCURRENT_API

# Checked in this order; the first marker present wins
ROUTING_ORDER = (CALL_API, CHAIN_API, CONCURRENT_API)

Producer = Callable[[Any], Mapping[str, Any]]


def classify(action: Any) -> Optional[ApiMarker]:
    """
    Return the marker an action carries, or None for unrelated actions.

    A marker counts as present when its key maps to a value other than None.
    """
    if not isinstance(action, Mapping):
        return None

    for marker in ROUTING_ORDER:
        if action.get(marker) is not None:
            return marker
    return None


def action_with(action: Mapping[str, Any], **fields: Any) -> Dict[str, Any]:
    """
    Shallow-copy an action, merge in fields and strip every marker key.

    Args:
        action: Original action
        **fields: Fields to set on the copy (e.g. type, res, err)

    Returns:
        New action dict without marker keys
    """
    merged = dict(action)
    merged.update(fields)
    for marker in ApiMarker:
        merged.pop(marker, None)
    return merged


def call_action(descriptor: Mapping[str, Any], **fields: Any) -> Dict[str, Any]:
    """Build a single-call action"""
    return {CALL_API: dict(descriptor), **fields}


def chain_action(*producers: Producer, **fields: Any) -> Dict[str, Any]:
    """Build a chain action from producers run in order"""
    return {CHAIN_API: list(producers), **fields}


def concurrent_action(*producers: Producer, **fields: Any) -> Dict[str, Any]:
    """Build a concurrent action from independent producers"""
    return {CONCURRENT_API: list(producers), **fields}
