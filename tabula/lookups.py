"""Lookup functions for SearchEngine.

Two ready-made collaborators:
- ``rows_lookup``: fuzzy search over an in-memory row collection (rapidfuzz)
- ``HttpLookup``: GET against a REST search endpoint (requests + tenacity)

Both return coroutine functions ``term -> rows`` suitable for
``SearchEngine(lookup)``. Timeout and retry policy live here, not in the engine.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence
import asyncio
import logging

import requests
from rapidfuzz import fuzz
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_random_exponential

from .engine.rows import get_value

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 70.0
DEFAULT_PARAM = "search"
DEFAULT_TIMEOUT = 30


def _row_fields(row: Any) -> List[str]:
    if isinstance(row, Mapping):
        return list(row.keys())
    return [name for name in vars(row) if not name.startswith("_")] if hasattr(row, "__dict__") else []


def score_row(row: Any, needle: str, fields: Sequence[str]) -> float:
    """Best partial-ratio score of ``needle`` against the row's fields (0-100)."""
    best = 0.0
    for name in fields:
        value = get_value(row, name)
        if value is None:
            continue
        score = fuzz.partial_ratio(needle, str(value).casefold())
        if score > best:
            best = score
            if best >= 100:
                break
    return best


def rows_lookup(
    rows: Sequence[Any],
    fields: Optional[Sequence[str]] = None,
    threshold: float = DEFAULT_THRESHOLD,
    limit: Optional[int] = None,
) -> Callable[[str], Awaitable[List[Any]]]:
    """Build a lookup that fuzzy-matches ``term`` against ``rows``.

    Args:
        rows: Collection to search (captured by reference)
        fields: Row fields to compare; default is every field of each row
        threshold: Minimum rapidfuzz partial_ratio score (0-100)
        limit: Maximum number of results

    Returns:
        Coroutine function returning matching rows, best score first,
        ties in input order
    """

    async def lookup(term: str) -> List[Any]:
        needle = term.casefold()
        scored = []
        for index, row in enumerate(rows):
            score = score_row(row, needle, fields or _row_fields(row))
            if score >= threshold:
                scored.append((-score, index, row))
        scored.sort(key=lambda item: (item[0], item[1]))
        matches = [row for _, _, row in scored]
        logger.debug(f"rows_lookup {term!r}: {len(matches)} of {len(rows)} rows matched")
        return matches[:limit] if limit is not None else matches

    return lookup


def _is_transient(exc: BaseException) -> bool:
    """Retry on network failures, 429 and 5xx; give up on other HTTP errors."""
    if isinstance(exc, requests.HTTPError):
        response = exc.response
        if response is None:
            return True
        return response.status_code == 429 or response.status_code >= 500
    return isinstance(exc, (requests.ConnectionError, requests.Timeout))


class HttpLookup:
    """Search lookup backed by a REST endpoint.

    The endpoint is called as ``GET url?<param>=<term>`` and may answer with
    a JSON list or an envelope ``{"data": [...]}``; SearchEngine unwraps both.

    Example:
        lookup = HttpLookup("https://example.com/api/albums", headers={"Authorization": f"Bearer {token}"})
        engine = SearchEngine(lookup)
    """

    def __init__(
        self,
        url: str,
        param: str = DEFAULT_PARAM,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        extra_params: Optional[Dict[str, Any]] = None,
    ):
        """Initialize lookup.

        Args:
            url: Search endpoint
            param: Query parameter carrying the term
            timeout: Per-request timeout in seconds
            headers: Extra request headers (auth)
            extra_params: Fixed query parameters sent with every request
        """
        self.url = url
        self.param = param
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.extra_params = dict(extra_params or {})

    @classmethod
    def from_config(cls, http_cfg: Mapping, url: str, **kwargs: Any) -> HttpLookup:
        """Build a lookup from the ``http`` config section.

        Args:
            http_cfg: ``cfg["http"]`` (timeout, param)
            url: Search endpoint
            **kwargs: Passed through (headers, extra_params)
        """
        return cls(
            url,
            param=http_cfg.get("param", DEFAULT_PARAM),
            timeout=http_cfg.get("timeout", DEFAULT_TIMEOUT),
            **kwargs,
        )

    @retry(
        retry=retry_if_exception(_is_transient),
        stop=stop_after_attempt(3),
        wait=wait_random_exponential(multiplier=0.5, max=10),
        reraise=True,
    )
    def _get(self, term: str) -> Any:
        """Execute GET request with retry logic.

        Raises:
            requests.HTTPError: On non-retryable errors or after the last attempt
        """
        params = {**self.extra_params, self.param: term}
        r = requests.get(self.url, headers=self.headers, params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    async def __call__(self, term: str) -> Any:
        # requests is blocking; keep the event loop responsive
        return await asyncio.to_thread(self._get, term)


__all__ = ["rows_lookup", "score_row", "HttpLookup", "DEFAULT_THRESHOLD"]
