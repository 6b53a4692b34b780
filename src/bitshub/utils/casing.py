"""Key casing for stored records.

Stored slices use camelCase keys, domain elements use snake_case fields.
"""

import re
from typing import Any

from pydantic.alias_generators import to_camel

# Digits stay attached to the word before them: addressLine1 -> address_line1
_HUMP = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_snake(key: str) -> str:
    return _HUMP.sub("_", key).lower()


def snake_keys(value: Any) -> Any:
    """``value`` with every mapping key, at any depth, in snake_case."""
    if isinstance(value, dict):
        return {to_snake(k): snake_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [snake_keys(v) for v in value]
    return value


def camel_keys(value: Any) -> Any:
    """``value`` with every mapping key, at any depth, in camelCase."""
    if isinstance(value, dict):
        return {to_camel(k): camel_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [camel_keys(v) for v in value]
    return value
