"""Compiled-template intermediate representation."""

from .lib import (
    CURRENT_SCHEMA_VERSION,
    POSITIONING_PROP,
    SIZE_PROP,
    CompiledTemplate,
    Island,
)

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "POSITIONING_PROP",
    "SIZE_PROP",
    "CompiledTemplate",
    "Island",
]
