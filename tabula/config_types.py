"""Typed configuration dataclasses for tabula.

Provides strongly-typed configuration objects that can be used throughout
the application for better type safety and IDE support.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any


@dataclass
class TableConfig:
    """Table instance defaults (page size, page window, id and date fields)."""
    page_size: int = 10
    page_window: int = 5
    id_field: str = "id"
    date_field: str = "created_at"

    def __post_init__(self):
        if self.page_size <= 0:
            raise ValueError(f"table.page_size must be positive, got {self.page_size}")
        if self.page_window <= 0:
            raise ValueError(f"table.page_window must be positive, got {self.page_window}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SearchConfig:
    """Debounced search configuration."""
    debounce_ms: int = 500
    min_length: int = 2
    immediate: bool = False
    fuzzy_threshold: float = 70  # 0-100 scale
    fields: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class HttpConfig:
    """Remote lookup (REST endpoint) configuration."""
    timeout: float = 30
    param: str = "search"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AppConfig:
    """Root application configuration with all subsections."""
    log_level: str = "INFO"
    table: TableConfig = field(default_factory=TableConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    http: HttpConfig = field(default_factory=HttpConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary.

        Returns:
            Nested dict structure matching config format
        """
        return {
            "log_level": self.log_level,
            "table": self.table.to_dict(),
            "search": self.search.to_dict(),
            "http": self.http.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AppConfig:
        """Create typed config from dictionary.

        Args:
            data: Dictionary config (from load_config)

        Returns:
            Typed AppConfig instance
        """
        return cls(
            log_level=data.get("log_level", "INFO"),
            table=TableConfig(**data.get("table", {})),
            search=SearchConfig(**data.get("search", {})),
            http=HttpConfig(**data.get("http", {})),
        )


__all__ = [
    "AppConfig",
    "TableConfig",
    "SearchConfig",
    "HttpConfig",
]
