"""Session configuration and executor composition."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from jqi.cache import CachingExecutor
from jqi.history import DEFAULT_MAX_ENTRIES, DEFAULT_RECENT_WEIGHT
from jqi.query import FilterQueryExecutor, QueryExecutor

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "query > "
DEFAULT_VISIBLE_HEIGHT = 20


@dataclass
class SessionConfig:
    prompt: str = DEFAULT_PROMPT
    visible_height: int = DEFAULT_VISIBLE_HEIGHT
    max_history: int = DEFAULT_MAX_ENTRIES
    recent_weight: float = DEFAULT_RECENT_WEIGHT
    suggestion_limit: int = 5
    use_cache: bool = True

    def __post_init__(self) -> None:
        if self.visible_height < 1:
            raise ValueError(f"visible_height must be >= 1, got {self.visible_height}")
        if self.max_history < 1:
            raise ValueError(f"max_history must be >= 1, got {self.max_history}")
        if not 0.0 <= self.recent_weight <= 1.0:
            raise ValueError(
                f"recent_weight must be between 0 and 1, got {self.recent_weight}"
            )
        if self.suggestion_limit < 1:
            raise ValueError(
                f"suggestion_limit must be >= 1, got {self.suggestion_limit}"
            )


def build_executor(
    config: SessionConfig, base: QueryExecutor | None = None
) -> QueryExecutor:
    """Compose the executor a session runs queries through.

    base defaults to the built-in filter executor; it is wrapped in a
    CachingExecutor when config.use_cache is set.
    """
    executor: QueryExecutor = base if base is not None else FilterQueryExecutor()
    if config.use_cache:
        executor = CachingExecutor(executor)
    logger.debug("using executor %s", type(executor).__name__)
    return executor
