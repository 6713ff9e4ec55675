"""Shared type aliases used across warble modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Command handler: a user-defined function with any signature
Handler: TypeAlias = Callable[..., Any]

# Raw values extracted by the resolver, before type conversion.
# Repeated options map to an ordered list; everything else to a string.
ExtractedValues: TypeAlias = dict[str, str | list[str]]
