"""Tests for typed configuration dataclasses."""

import pytest

from tabula.config import load_typed_config
from tabula.config_types import AppConfig, HttpConfig, SearchConfig, TableConfig


class TestAppConfig:

    def test_defaults(self):
        cfg = AppConfig()
        assert cfg.table.page_size == 10
        assert cfg.table.page_window == 5
        assert cfg.table.date_field == "created_at"
        assert cfg.search.debounce_ms == 500
        assert cfg.http.timeout == 30

    def test_from_dict_partial_sections(self):
        cfg = AppConfig.from_dict({'log_level': 'DEBUG', 'search': {'min_length': 0, 'immediate': True}})
        assert cfg.log_level == 'DEBUG'
        assert cfg.search.min_length == 0
        assert cfg.search.immediate is True
        assert cfg.table == TableConfig()

    def test_to_dict_matches_from_dict(self):
        cfg = AppConfig(search=SearchConfig(fields=['title']), http=HttpConfig(param='q'))
        assert AppConfig.from_dict(cfg.to_dict()) == cfg

    def test_unknown_key_rejected(self):
        with pytest.raises(TypeError):
            AppConfig.from_dict({'table': {'rows_per_page': 3}})


class TestTableConfig:

    @pytest.mark.parametrize('field', ['page_size', 'page_window'])
    def test_non_positive_rejected(self, field):
        with pytest.raises(ValueError):
            TableConfig(**{field: 0})


def test_load_typed_config_with_overrides():
    cfg = load_typed_config({'table': {'page_size': 25}}, configure_logging=False)
    assert isinstance(cfg, AppConfig)
    assert cfg.table.page_size == 25
    assert cfg.search == SearchConfig()
