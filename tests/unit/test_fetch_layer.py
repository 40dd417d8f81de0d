"""Tests for the CLI's in-memory fetch layer (filter_rows, source loading)."""

from datetime import date

import click
import pytest
import yaml

from tabula.cli.helpers import filter_rows, load_table_source


@pytest.fixture
def shoots():
    return [
        {"id": 1, "kind": "wedding", "created_at": "2024-01-01T09:30:00"},
        {"id": 2, "kind": "party", "created_at": date(2024, 1, 15)},
        {"id": 3, "kind": "wedding", "created_at": "2024-02-01"},
        {"id": 4, "kind": "wedding", "created_at": None},
    ]


class TestDateBounds:
    """date_from / date_to are inclusive bounds on the date field."""

    def test_inclusive_bounds(self, shoots):
        matched = filter_rows(shoots, {"date_from": "2024-01-01", "date_to": "2024-01-15"})
        assert [row["id"] for row in matched] == [1, 2]

    def test_single_bound(self, shoots):
        assert [row["id"] for row in filter_rows(shoots, {"date_from": "2024-01-02"})] == [2, 3]
        assert [row["id"] for row in filter_rows(shoots, {"date_to": "2024-01-01"})] == [1]

    def test_combined_with_exact_filters(self, shoots):
        matched = filter_rows(shoots, {"kind": "wedding", "date_to": "2024-12-31"})
        assert [row["id"] for row in matched] == [1, 3]

    def test_rows_without_date_kept_when_unbounded(self, shoots):
        assert len(filter_rows(shoots, {})) == 4

    def test_custom_date_field(self):
        rows = [{"id": 1, "shot_on": "2023-05-01"}, {"id": 2, "shot_on": "2024-05-01"}]
        matched = filter_rows(rows, {"date_from": "2024-01-01"}, date_field="shot_on")
        assert [row["id"] for row in matched] == [2]

    def test_invalid_bound_rejected(self, shoots):
        with pytest.raises(click.BadParameter):
            filter_rows(shoots, {"date_to": "next week"})


def test_yaml_seed_dates_become_active_strings(tmp_path):
    source = tmp_path / "shoots.yaml"
    source.write_text(yaml.safe_dump({
        "filters": {"date_from": date(2024, 1, 2)},
        "rows": [{"id": 1}],
    }), encoding="utf-8")
    assert load_table_source(source).filters == {"date_from": "2024-01-02"}
