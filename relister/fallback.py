"""
Ordered fallback chains for brittle UI controls.

A chain is a list of strategies tried in priority order. The first one that
completes wins and nothing after it runs. A strategy fails by raising or by
returning False. If every strategy fails the caller gets an exhausted
result, never a silent success.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple

from .errors import LocatorExhaustedError

logger = logging.getLogger(__name__)


@dataclass
class Strategy:
    name: str
    action: Callable[[], Awaitable[Any]]


@dataclass
class FallbackResult:
    target: str
    strategy: Optional[str] = None
    value: Any = None
    failures: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.strategy is not None

    def unwrap(self) -> Any:
        """Return the winning value or raise LocatorExhaustedError."""
        if not self.succeeded:
            raise LocatorExhaustedError(self.target, self.failures)
        return self.value


async def first_success(target: str, strategies: Sequence[Strategy]) -> FallbackResult:
    result = FallbackResult(target=target)
    for position, strategy in enumerate(strategies, 1):
        try:
            value = await strategy.action()
        except Exception as e:
            logger.debug(f"{target}: strategy {position} ({strategy.name}) raised {e!r}")
            result.failures.append((strategy.name, repr(e)))
            continue
        if value is False:
            logger.debug(f"{target}: strategy {position} ({strategy.name}) found nothing")
            result.failures.append((strategy.name, "no match"))
            continue
        if position > 1:
            logger.info(f"{target}: succeeded with fallback {position} ({strategy.name})")
        result.strategy = strategy.name
        result.value = value
        return result

    logger.error(f"{target}: all {len(strategies)} strategies failed")
    return result
