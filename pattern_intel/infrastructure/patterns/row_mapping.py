"""
Helpers for turning SQL rows into domain values.

JSONB columns arrive either decoded (dict) or as text depending on the
driver; DECIMAL columns arrive as Decimal. Key columns are UUIDs.
"""

import json
import logging
import uuid
from decimal import Decimal
from typing import Any, Optional

logger = logging.getLogger(__name__)


def load_json(value: Any) -> dict[str, Any]:
    """Return a JSON object column as a dict. Anything else becomes {}."""
    if isinstance(value, dict):
        return value
    if isinstance(value, (str, bytes)) and value:
        try:
            decoded = json.loads(value)
        except ValueError:
            logger.warning("Ignoring malformed JSON column value")
            return {}
        return decoded if isinstance(decoded, dict) else {}
    return {}


def to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return float(value)
    return None


def to_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def parse_uuid(value: str) -> Optional[uuid.UUID]:
    """Return value as a UUID, or None if it is not one.

    Key columns are typed uuid; binding anything else makes the driver
    reject the whole query.
    """
    try:
        return uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return None
