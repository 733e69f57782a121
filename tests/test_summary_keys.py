from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.models import Heartbeat
from core.summary_keys import (
    UNKNOWN_SUMMARY_KEY,
    InvalidDimension,
    SummaryDimension,
    column_name,
    get_key,
    parse_dimension,
)


def _heartbeat(**overrides) -> Heartbeat:
    fields = dict(
        entity="/src/app.py",
        project="app",
        editor="Neovim",
        language="Python",
        operating_system="Linux",
        machine="desk",
        branch="main",
        category="coding",
        time=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Heartbeat(**fields)


def test_returns_field_values_verbatim() -> None:
    heartbeat = _heartbeat()
    assert heartbeat.get_key(SummaryDimension.PROJECT) == "app"
    assert heartbeat.get_key(SummaryDimension.EDITOR) == "Neovim"
    assert heartbeat.get_key(SummaryDimension.LANGUAGE) == "Python"
    assert heartbeat.get_key(SummaryDimension.OPERATING_SYSTEM) == "Linux"
    assert heartbeat.get_key(SummaryDimension.MACHINE) == "desk"
    assert heartbeat.get_key(SummaryDimension.BRANCH) == "main"
    assert heartbeat.get_key(SummaryDimension.ENTITY) == "/src/app.py"
    assert heartbeat.get_key(SummaryDimension.CATEGORY) == "coding"


def test_empty_value_falls_back_to_unknown() -> None:
    heartbeat = _heartbeat(project="", branch="")
    assert heartbeat.get_key(SummaryDimension.PROJECT) == UNKNOWN_SUMMARY_KEY
    assert heartbeat.get_key(SummaryDimension.BRANCH) == UNKNOWN_SUMMARY_KEY


def test_invalid_dimension_raises() -> None:
    with pytest.raises(InvalidDimension):
        get_key(_heartbeat(), "label")
    with pytest.raises(InvalidDimension):
        column_name(3)


def test_every_dimension_has_a_column() -> None:
    columns = {dimension: column_name(dimension) for dimension in SummaryDimension}
    assert columns[SummaryDimension.OPERATING_SYSTEM] == "operating_system"
    assert columns[SummaryDimension.CATEGORY] == "category"
    assert len(set(columns.values())) == len(SummaryDimension)


def test_parse_dimension_accepts_names_and_values() -> None:
    assert parse_dimension("Project") is SummaryDimension.PROJECT
    assert parse_dimension("operating_system") is SummaryDimension.OPERATING_SYSTEM
    assert parse_dimension("os") is SummaryDimension.OPERATING_SYSTEM
    assert parse_dimension(SummaryDimension.BRANCH) is SummaryDimension.BRANCH
    with pytest.raises(InvalidDimension):
        parse_dimension("label")
