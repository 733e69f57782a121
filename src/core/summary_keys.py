"""Grouping keys used by summary aggregation (core domain)."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from core.models import Heartbeat

# Aggregation must never group on an empty string.
UNKNOWN_SUMMARY_KEY = "unknown"


class InvalidDimension(ValueError):
    """Raised for a selector that is not a known summary dimension."""


class SummaryDimension(Enum):
    PROJECT = "project"
    EDITOR = "editor"
    LANGUAGE = "language"
    OPERATING_SYSTEM = "operating_system"
    MACHINE = "machine"
    BRANCH = "branch"
    ENTITY = "entity"
    CATEGORY = "category"


# Heartbeat attribute per dimension.
_ATTRIBUTES = {
    SummaryDimension.PROJECT: "project",
    SummaryDimension.EDITOR: "editor",
    SummaryDimension.LANGUAGE: "language",
    SummaryDimension.OPERATING_SYSTEM: "operating_system",
    SummaryDimension.MACHINE: "machine",
    SummaryDimension.BRANCH: "branch",
    SummaryDimension.ENTITY: "entity",
    SummaryDimension.CATEGORY: "category",
}

# Storage column per dimension, used to build grouping queries.
_COLUMNS = {
    SummaryDimension.PROJECT: "project",
    SummaryDimension.EDITOR: "editor",
    SummaryDimension.LANGUAGE: "language",
    SummaryDimension.OPERATING_SYSTEM: "operating_system",
    SummaryDimension.MACHINE: "machine",
    SummaryDimension.BRANCH: "branch",
    SummaryDimension.ENTITY: "entity",
    SummaryDimension.CATEGORY: "category",
}


def parse_dimension(value: Union[SummaryDimension, str]) -> SummaryDimension:
    """Resolve a dimension from an enum member, its value or its name."""

    if isinstance(value, SummaryDimension):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        for dimension in SummaryDimension:
            if normalized in (dimension.value, dimension.name.lower()):
                return dimension
        # "os" is what users type on the command line
        if normalized == "os":
            return SummaryDimension.OPERATING_SYSTEM
    raise InvalidDimension(f"Unknown summary dimension: {value!r}")


def get_key(heartbeat: Heartbeat, dimension: SummaryDimension) -> str:
    """Return the grouping key, falling back to UNKNOWN_SUMMARY_KEY."""

    if not isinstance(dimension, SummaryDimension):
        raise InvalidDimension(f"Unknown summary dimension: {dimension!r}")
    key = getattr(heartbeat, _ATTRIBUTES[dimension])
    return key or UNKNOWN_SUMMARY_KEY


def column_name(dimension: SummaryDimension) -> str:
    if not isinstance(dimension, SummaryDimension):
        raise InvalidDimension(f"Unknown summary dimension: {dimension!r}")
    return _COLUMNS[dimension]
