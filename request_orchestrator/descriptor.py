"""
Descriptor Extractor

Normalizes the call spec embedded in a single-call action into a CallDescriptor.
"""

from typing import Any, Mapping

from pydantic import ValidationError

from shared.errors import DescriptorError
from shared.schemas import CallDescriptor
from request_orchestrator.markers import CALL_API


def extract_params(call_spec: Mapping[str, Any]) -> CallDescriptor:
    """
    Build a CallDescriptor from a call spec.

    ``url`` falls back to ``path``; every other field is passed through.

    Args:
        call_spec: Mapping with method, url/path, query, body, success/error
            types and after hooks (snake_case or camelCase keys)

    Returns:
        CallDescriptor

    Raises:
        DescriptorError: If the spec is not a mapping, has no URL or no method
    """
    if not isinstance(call_spec, Mapping):
        raise DescriptorError(f"Call spec must be a mapping, got {type(call_spec).__name__}")

    url = call_spec.get("url") or call_spec.get("path")
    if not url:
        raise DescriptorError("Call spec has neither 'url' nor 'path'")

    fields = {key: value for key, value in call_spec.items() if key not in ("url", "path")}
    fields["url"] = url

    try:
        return CallDescriptor.model_validate(fields)
    except ValidationError as e:
        raise DescriptorError(f"Invalid call spec: {e}") from e


def descriptor_from_action(action: Mapping[str, Any]) -> CallDescriptor:
    """
    Extract the CallDescriptor of a single-call action.

    Raises:
        DescriptorError: If the action carries no CALL_API spec
    """
    if not isinstance(action, Mapping) or action.get(CALL_API) is None:
        raise DescriptorError("Producer must return an action carrying a CALL_API spec")

    return extract_params(action[CALL_API])
