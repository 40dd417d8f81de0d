"""Pytest fixtures for test configuration.

Shared row collections and configuration for engine and CLI tests.
.env files are ignored automatically while PYTEST_CURRENT_TEST is set.
"""
from __future__ import annotations
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

import pytest


@pytest.fixture
def sample_rows() -> List[Dict[str, Any]]:
    """Albums as returned by the admin API (ids 1..25, some duplicate keys)."""
    statuses = ["published", "draft", "archived"]
    return [
        {
            "id": i,
            "title": f"Album {i:02d}",
            "status": statuses[i % 3],
            "likes": (i * 7) % 5,
            "created": date(2024, 1, 1 + (i % 28)),
        }
        for i in range(1, 26)
    ]


@pytest.fixture
def test_config(tmp_path: Path) -> Dict[str, Any]:
    """Minimal configuration dict for CLI tests (pass as CliRunner obj)."""
    return {
        'log_level': 'DEBUG',
        'table': {'page_size': 10, 'page_window': 5, 'id_field': 'id', 'date_field': 'created'},
        'search': {
            'debounce_ms': 10,
            'min_length': 2,
            'immediate': False,
            'fuzzy_threshold': 70,
            'fields': [],
        },
        'http': {'timeout': 5, 'param': 'search'},
    }
