"""Debounced asynchronous search with stale-result fencing.

``SearchEngine`` is the asyncio counterpart of a debounced search field:
every ``set_term`` restarts the debounce window and only the last term typed
within the window reaches the lookup function.

Fencing uses a generation counter. Each ``set_term``/``search``/``clear_search``
call bumps the generation; a lookup remembers the generation it was issued
under and its outcome is dropped if the generation moved on meanwhile. A
lookup that already started is never cancelled (the request may be on the
wire); its result simply cannot land.

Example:
    async def fetch(term):
        return await api.search_albums(term)

    engine = SearchEngine(fetch, debounce_ms=300)
    engine.changed.connect(lambda state: render(state.results))
    engine.set_term("wed")
    engine.set_term("wedding")   # only "wedding" is looked up
"""
from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Set
import asyncio
import inspect
import logging

from ..signals import Signal

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 500
DEFAULT_MIN_LENGTH = 2

Lookup = Callable[[str], Any]


@dataclass(frozen=True)
class SearchState:
    """Snapshot of the search state handed to observers."""

    term: str = ""
    results: List[Any] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None


def unwrap_results(response: Any) -> List[Any]:
    """Accept either a list of rows or an API envelope ``{"data": [...]}``."""
    if response is None:
        return []
    if isinstance(response, Mapping):
        data = response.get("data")
        return list(data) if data is not None else []
    return list(response)


class SearchEngine:
    """Debounced lookup driver.

    Signals:
        changed: Emitted with a SearchState after every state change
    """

    def __init__(
        self,
        lookup: Lookup,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        min_length: int = DEFAULT_MIN_LENGTH,
        immediate: bool = False,
    ):
        """Initialize search engine.

        Args:
            lookup: ``term -> rows`` coroutine function (plain callables also work)
            debounce_ms: Quiet period after the last set_term before looking up
            min_length: Terms shorter than this clear results and never look up
            immediate: Also look up the empty term (when min_length allows it)
        """
        if debounce_ms < 0:
            raise ValueError(f"debounce_ms must not be negative, got {debounce_ms}")
        if min_length < 0:
            raise ValueError(f"min_length must not be negative, got {min_length}")

        self._lookup = lookup
        self._debounce_ms = debounce_ms
        self._min_length = min_length
        self._immediate = immediate

        self._term = ""
        self._results: List[Any] = []
        self._loading = False
        self._error: Optional[str] = None

        self._generation = 0
        self._timer: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self.lookups_issued = 0

        self.changed = Signal("search.changed")

    # -- state -----------------------------------------------------------

    @property
    def term(self) -> str:
        return self._term

    @property
    def results(self) -> List[Any]:
        return list(self._results)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def state(self) -> SearchState:
        return SearchState(
            term=self._term,
            results=list(self._results),
            loading=self._loading,
            error=self._error,
        )

    @property
    def pending(self) -> bool:
        """True while a debounce timer is armed or the latest lookup is running."""
        return self._timer is not None or self._loading

    @property
    def debounce_ms(self) -> int:
        return self._debounce_ms

    @property
    def min_length(self) -> int:
        return self._min_length

    # -- transitions -----------------------------------------------------

    def set_term(self, term: Optional[str]) -> None:
        """Record a new term and (re)arm the debounce timer.

        Must be called from a running event loop when a lookup can follow.

        Raises:
            RuntimeError: A lookup would follow but no event loop is running
                (state is left untouched)
        """
        term = term or ""
        below_gate = len(term) < self._min_length
        schedule = not below_gate and bool(term or self._immediate)
        # Resolve the loop before mutating anything
        loop = asyncio.get_running_loop() if schedule else None

        self._term = term
        token = self._advance()

        if below_gate:
            self._results = []
            logger.debug(f"Term {term!r} below min_length={self._min_length}, results cleared")
        elif loop is not None:
            self._timer = loop.create_task(self._debounce(term, token))
        self._notify()

    async def search(self) -> None:
        """Look up the current term now, bypassing the debounce window."""
        token = self._advance()
        term = self._term
        if len(term) < self._min_length:
            self._results = []
            self._notify()
            return
        await self._run(term, token)

    def clear_search(self) -> None:
        """Reset term, results and error in one step."""
        self._advance()
        self._term = ""
        self._results = []
        self._error = None
        self._notify()

    async def wait_settled(self) -> None:
        """Wait until no debounce timer is armed and no lookup is running."""
        while self._timer is not None or self._inflight:
            pending = [task for task in (self._timer, *self._inflight) if task is not None]
            await asyncio.gather(*pending, return_exceptions=True)

    # -- internals -------------------------------------------------------

    def _advance(self) -> int:
        """Invalidate the armed timer and every lookup issued so far."""
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        # An in-flight lookup of an older generation can no longer land
        self._loading = False
        return self._generation

    def _is_current(self, token: int) -> bool:
        return token == self._generation

    async def _debounce(self, term: str, token: int) -> None:
        await asyncio.sleep(self._debounce_ms / 1000)
        if asyncio.current_task() is self._timer:
            self._timer = None
        if not self._is_current(token):
            return
        task = asyncio.get_running_loop().create_task(self._run(term, token))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _run(self, term: str, token: int) -> None:
        self.lookups_issued += 1
        self._loading = True
        self._error = None
        self._notify()
        logger.debug(f"Lookup #{self.lookups_issued} issued for {term!r}")

        try:
            response = self._lookup(term)
            if inspect.isawaitable(response):
                response = await response
            results = unwrap_results(response)
        except Exception as e:
            if not self._is_current(token):
                logger.debug(f"Discarding stale failure for {term!r}: {e}")
                return
            logger.warning(f"Search lookup failed for {term!r}: {e}")
            self._results = []
            self._error = str(e) or e.__class__.__name__
        else:
            if not self._is_current(token):
                logger.debug(f"Discarding stale results for {term!r}")
                return
            self._results = results
            self._error = None

        self._loading = False
        self._notify()

    def _notify(self) -> None:
        self.changed.emit(self.state)


__all__ = ["SearchEngine", "SearchState", "unwrap_results", "DEFAULT_DEBOUNCE_MS", "DEFAULT_MIN_LENGTH"]
