"""Tests for the debounced SearchEngine.

Each test drives its own event loop through ``asyncio.run`` with short
debounce windows, so timing assertions stay well clear of scheduler jitter.
"""

import asyncio

import pytest

from tabula.engine.search import SearchEngine, SearchState, unwrap_results


async def wait_for(predicate, timeout=2.0):
    """Yield to the loop until ``predicate()`` holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.001)


class RecordingLookup:
    """Lookup double that records terms and can hold chosen terms open."""

    def __init__(self, slow_terms=()):
        self.terms = []
        self.slow_terms = set(slow_terms)
        self.gate = None

    async def __call__(self, term):
        self.terms.append(term)
        if term in self.slow_terms:
            if self.gate is None:
                self.gate = asyncio.Event()
            await self.gate.wait()
        return [f"result:{term}"]


class TestUnwrapResults:

    def test_plain_list(self):
        assert unwrap_results([1, 2]) == [1, 2]

    def test_envelope(self):
        assert unwrap_results({"data": [{"id": 1}], "meta": {}}) == [{"id": 1}]

    def test_missing_data(self):
        assert unwrap_results({"meta": {}}) == []
        assert unwrap_results(None) == []


class TestDebounce:

    def test_rapid_terms_collapse_into_one_lookup(self):
        lookup = RecordingLookup()

        async def scenario():
            engine = SearchEngine(lookup, debounce_ms=20)
            for term in ("a", "ab", "abc"):
                engine.set_term(term)
            await engine.wait_settled()
            return engine

        engine = asyncio.run(scenario())
        assert lookup.terms == ["abc"]
        assert engine.lookups_issued == 1
        assert engine.results == ["result:abc"]
        assert not engine.loading

    def test_lookup_waits_for_quiet_period(self):
        lookup = RecordingLookup()

        async def scenario():
            engine = SearchEngine(lookup, debounce_ms=50)
            engine.set_term("wedding")
            await asyncio.sleep(0.01)
            issued_early = list(lookup.terms)
            assert engine.pending
            await engine.wait_settled()
            return issued_early

        assert asyncio.run(scenario()) == []
        assert lookup.terms == ["wedding"]

    def test_search_bypasses_debounce(self):
        lookup = RecordingLookup()

        async def scenario():
            engine = SearchEngine(lookup, debounce_ms=10_000)
            engine.set_term("wed")
            await engine.search()
            await engine.wait_settled()
            return engine

        engine = asyncio.run(scenario())
        assert lookup.terms == ["wed"]
        assert engine.results == ["result:wed"]
        assert not engine.pending

    def test_set_term_without_loop_leaves_state_untouched(self):
        states = []
        engine = SearchEngine(RecordingLookup(), debounce_ms=0)
        engine.changed.connect(states.append)
        with pytest.raises(RuntimeError):
            engine.set_term("wed")
        assert engine.term == ""
        assert not engine.pending
        assert states == []

    def test_short_term_needs_no_loop(self):
        engine = SearchEngine(RecordingLookup(), debounce_ms=0)
        engine.set_term("w")
        assert engine.term == "w"
        assert engine.results == []
        assert not engine.pending

    def test_negative_settings_rejected(self):
        with pytest.raises(ValueError):
            SearchEngine(RecordingLookup(), debounce_ms=-1)
        with pytest.raises(ValueError):
            SearchEngine(RecordingLookup(), min_length=-1)


class TestMinLength:

    def test_short_term_clears_results_without_lookup(self):
        lookup = RecordingLookup()

        async def scenario():
            engine = SearchEngine(lookup, debounce_ms=0)
            engine.set_term("wed")
            await engine.wait_settled()
            assert engine.results == ["result:wed"]
            engine.set_term("w")
            await engine.wait_settled()
            return engine

        engine = asyncio.run(scenario())
        assert engine.results == []
        assert lookup.terms == ["wed"]

    def test_empty_term_skipped_unless_immediate(self):
        lookup = RecordingLookup()

        async def scenario(immediate):
            engine = SearchEngine(lookup, debounce_ms=0, min_length=0, immediate=immediate)
            engine.set_term("")
            await engine.wait_settled()
            return engine

        asyncio.run(scenario(immediate=False))
        assert lookup.terms == []
        engine = asyncio.run(scenario(immediate=True))
        assert lookup.terms == [""]
        assert engine.results == ["result:"]


class TestRaceSafety:
    """An older lookup resolving late must never overwrite newer results."""

    def test_slow_old_lookup_is_discarded(self):
        lookup = RecordingLookup(slow_terms={"ab"})

        async def scenario():
            engine = SearchEngine(lookup, debounce_ms=0)
            engine.set_term("ab")
            await wait_for(lambda: lookup.terms == ["ab"])
            engine.set_term("abc")
            await wait_for(lambda: engine.results == ["result:abc"])
            lookup.gate.set()
            await engine.wait_settled()
            return engine

        engine = asyncio.run(scenario())
        assert lookup.terms == ["ab", "abc"]
        assert engine.results == ["result:abc"]
        assert engine.term == "abc"
        assert not engine.loading
        assert engine.lookups_issued == 2

    def test_started_lookup_is_not_cancelled(self):
        finished = []

        async def lookup(term):
            await asyncio.sleep(0.02)
            finished.append(term)
            return [term]

        async def scenario():
            engine = SearchEngine(lookup, debounce_ms=0)
            engine.set_term("ab")
            await wait_for(lambda: engine.loading)
            engine.set_term("x")
            await engine.wait_settled()
            return engine

        engine = asyncio.run(scenario())
        assert finished == ["ab"]
        assert engine.results == []

    def test_clear_search_fences_inflight_lookup(self):
        lookup = RecordingLookup(slow_terms={"wed"})

        async def scenario():
            engine = SearchEngine(lookup, debounce_ms=0)
            engine.set_term("wed")
            await wait_for(lambda: lookup.terms == ["wed"])
            engine.clear_search()
            lookup.gate.set()
            await engine.wait_settled()
            return engine

        engine = asyncio.run(scenario())
        assert engine.term == ""
        assert engine.results == []
        assert not engine.loading


class TestErrors:

    def test_failure_is_captured(self):
        async def lookup(term):
            raise RuntimeError("backend down")

        async def scenario():
            engine = SearchEngine(lookup, debounce_ms=0)
            engine.set_term("wed")
            await engine.wait_settled()
            return engine

        engine = asyncio.run(scenario())
        assert engine.error == "backend down"
        assert engine.results == []
        assert not engine.loading

    def test_next_success_clears_error(self):
        attempts = []

        async def lookup(term):
            attempts.append(term)
            if len(attempts) == 1:
                raise RuntimeError("flaky")
            return {"data": [term]}

        async def scenario():
            engine = SearchEngine(lookup, debounce_ms=0)
            engine.set_term("wed")
            await engine.wait_settled()
            assert engine.error == "flaky"
            engine.set_term("wedding")
            await engine.wait_settled()
            return engine

        engine = asyncio.run(scenario())
        assert engine.error is None
        assert engine.results == ["wedding"]

    def test_sync_lookup_supported(self):
        async def scenario():
            engine = SearchEngine(lambda term: [term.upper()], debounce_ms=0)
            engine.set_term("wed")
            await engine.wait_settled()
            return engine

        assert asyncio.run(scenario()).results == ["WED"]


class TestNotifications:

    def test_states_emitted_through_lookup(self):
        lookup = RecordingLookup()
        states = []

        async def scenario():
            engine = SearchEngine(lookup, debounce_ms=0)
            engine.changed.connect(states.append)
            engine.set_term("wed")
            await engine.wait_settled()

        asyncio.run(scenario())
        assert all(isinstance(state, SearchState) for state in states)
        assert any(state.loading for state in states)
        assert states[-1] == SearchState(term="wed", results=["result:wed"], loading=False, error=None)
