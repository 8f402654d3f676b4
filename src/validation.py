"""
Schema Validation - JSON Schema validation of template declarations.

Each resource kind has a Draft 7 schema its template entries must satisfy
before any deploy step runs.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from jsonschema import Draft7Validator, ValidationError

logger = logging.getLogger(__name__)

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

DECLARATION_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "secrets": {"type": "string"},
    "contracts": {
        "type": "object",
        "required": ["name", "network", "address"],
        "properties": {
            "name": {"type": "string"},
            "network": {"type": "string"},
            "address": {"type": "string"},
            "abi": {},
            "nat-spec": {"type": "string"},
        },
    },
    "relayers": {
        "type": "object",
        "required": ["name", "network"],
        "properties": {
            "name": {"type": "string"},
            "network": {"type": "string"},
            "min-balance": {"type": ["integer", "string"]},
            "address-from-relayer": {"type": "string"},
            "api-keys": {
                "type": "array",
                "items": {"type": "string", "pattern": r"^[^.]+$"},
                "uniqueItems": True,
            },
            "policy": {
                "type": "object",
                "properties": {
                    "whitelist-receivers": _STRING_LIST,
                    "gas-price-cap": {"type": ["integer", "string"]},
                    "eip1559-pricing": {"type": "boolean"},
                },
            },
        },
    },
    "autotasks": {
        "type": "object",
        "required": ["name", "path", "trigger"],
        "properties": {
            "name": {"type": "string"},
            "path": {"type": "string"},
            "relayer": {"type": "string"},
            "paused": {"type": "boolean"},
            "trigger": {
                "type": "object",
                "required": ["type"],
                "properties": {
                    "type": {"enum": ["schedule", "webhook", "sentinel"]},
                    "frequency": {"type": "integer", "minimum": 1},
                    "cron": {"type": "string"},
                },
            },
        },
    },
    "notifications": {
        "type": "object",
        "required": ["type", "name"],
        "properties": {
            "type": {
                "enum": [
                    "email",
                    "slack",
                    "discord",
                    "telegram",
                    "datadog",
                    "webhook",
                    "opsgenie",
                    "pager-duty",
                ]
            },
            "name": {"type": "string"},
            "paused": {"type": "boolean"},
            "config": {"type": "object"},
        },
    },
    "sentinels": {
        "type": "object",
        "required": ["name", "network"],
        "properties": {
            "type": {"enum": ["BLOCK", "FORTA"]},
            "name": {"type": "string"},
            "network": {"type": "string"},
            "addresses": _STRING_LIST,
            "abi": {},
            "paused": {"type": "boolean"},
            "autotask-condition": {"type": "string"},
            "autotask-trigger": {"type": "string"},
            "confirm-level": {"type": ["integer", "string"]},
            "risk-category": {"type": "string"},
            "agent-ids": _STRING_LIST,
            "forta-node-id": {"type": "string"},
            "alert-threshold": {
                "type": "object",
                "properties": {
                    "amount": {"type": "integer"},
                    "window-seconds": {"type": "integer"},
                },
            },
            "notify-config": {
                "type": "object",
                "properties": {
                    "timeout": {"type": "integer"},
                    "message": {"type": "string"},
                    "channels": _STRING_LIST,
                },
            },
            "conditions": {"type": "object"},
        },
    },
}


def _error_location(error: ValidationError) -> str:
    return ".".join(str(part) for part in error.absolute_path) or "(root)"


def validate_spec_against_schema(
    spec: Any, schema: Dict[str, Any]
) -> Tuple[bool, Optional[str]]:
    """
    Check a template entry against a Draft 7 schema.

    Every violation is reported as ``<location>: <message>``, ordered by
    location so the same entry always yields the same text.

    Returns:
        Tuple of (is_valid, error_message)
    """
    violations = sorted(
        Draft7Validator(schema).iter_errors(spec),
        key=lambda error: [str(part) for part in error.absolute_path],
    )
    if not violations:
        return True, None
    return False, "; ".join(
        f"{_error_location(error)}: {error.message}" for error in violations
    )


def validate_declaration(kind: str, spec: Any) -> Tuple[bool, Optional[str]]:
    """
    Validate one template entry of a resource kind.

    Returns:
        Tuple of (is_valid, error_message)
    """
    schema = DECLARATION_SCHEMAS.get(kind)
    if schema is None:
        return False, f"Unknown resource kind: {kind}"
    return validate_spec_against_schema(spec, schema)
