"""Unit tests for query settings and data source models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from querycraft.errors import QueryCraftError, SettingsError
from querycraft.settings import DataSource, QuerySettings


def test_defaults():
    settings = QuerySettings()
    assert settings.row_limit == 1000
    assert settings.streaming_row_limit == 1000
    assert settings.streaming is False


def test_from_mapping_validates():
    settings = QuerySettings.from_mapping({"row_limit": 25, "streaming": True})
    assert settings.row_limit == 25
    assert settings.streaming is True


def test_negative_limit_raises_settings_error():
    with pytest.raises(SettingsError) as exc_info:
        QuerySettings.from_mapping({"row_limit": -1})
    assert isinstance(exc_info.value, QueryCraftError)
    assert exc_info.value.errors[0]["loc"] == ("row_limit",)


def test_unknown_setting_raises_settings_error():
    with pytest.raises(SettingsError) as exc_info:
        QuerySettings.from_mapping({"page_size": 10})
    assert len(exc_info.value.errors) == 1


def test_data_source_is_immutable():
    source = DataSource(name="pg", dialect="postgres")
    with pytest.raises(ValidationError):
        source.dialect = "mysql"
    assert source.supports_streaming is False
