"""Tests for id-keyed row selection."""

from tabula.engine.selection import Selection


class TestToggleOne:

    def test_toggle_adds_then_removes(self):
        selection = Selection()
        assert selection.toggle_one(7) is True
        assert 7 in selection
        assert selection.toggle_one(7) is False
        assert 7 not in selection

    def test_initial_ids(self):
        selection = Selection([1, 2])
        assert selection.selected == frozenset({1, 2})
        assert len(selection) == 2


class TestToggleAll:
    """Header checkbox is scoped to the visible page."""

    def test_selects_whole_page_when_any_unselected(self):
        selection = Selection([1])
        assert selection.toggle_all([1, 2, 3])
        assert selection.selected == frozenset({1, 2, 3})

    def test_clears_entire_selection_when_page_fully_selected(self):
        selection = Selection([1, 2, 3, 42])
        selection.toggle_all([1, 2, 3])
        assert selection.selected == frozenset()

    def test_empty_page_is_noop(self):
        selection = Selection([5])
        assert not selection.toggle_all([])
        assert selection.selected == frozenset({5})

    def test_checked_and_indeterminate_states(self):
        selection = Selection([1, 2])
        assert selection.all_selected([1, 2])
        assert not selection.some_selected([1, 2])
        assert selection.some_selected([1, 2, 3])
        assert not selection.all_selected([1, 2, 3])
        assert not selection.all_selected([])


class TestReconcile:

    def test_drops_missing_ids(self):
        selection = Selection([1, 2, 3])
        dropped = selection.reconcile([1, 3, 4])
        assert dropped == {2}
        assert selection.selected == frozenset({1, 3})

    def test_clear_reports_change(self):
        selection = Selection()
        assert not selection.clear()
        selection.select(["a"])
        assert selection.clear()
        assert len(selection) == 0
