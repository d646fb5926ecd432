"""Post-commit hooks fired after catalog mutations settle."""

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class MutationEvent(str, Enum):
    STORE_CREATED = "store_created"
    COLLECTION_CREATED = "collection_created"
    FLYER_CREATED = "flyer_created"
    FLYER_UPDATED = "flyer_updated"


@dataclass(frozen=True)
class MutationOutcome:
    """What a hook sees: the settled record and, for updates, the prior one."""

    event: MutationEvent
    record: Any
    previous: Optional[Any] = None


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    """A settled record plus whatever its hooks produced (e.g. notifications)."""

    record: T
    triggered: Tuple[Any, ...] = ()


Hook = Callable[[MutationOutcome], Any]


class HookRegistry:
    """Explicit list of side effects per mutation event.

    Hooks run after the primary mutation has committed. They are best-effort:
    a hook that raises is logged and skipped, and the mutation still succeeds.
    """

    def __init__(self):
        self._hooks: Dict[MutationEvent, List[Hook]] = defaultdict(list)

    def register(self, event: MutationEvent, hook: Hook) -> None:
        self._hooks[event].append(hook)

    def hooks_for(self, event: MutationEvent) -> Tuple[Hook, ...]:
        return tuple(self._hooks.get(event, ()))

    def fire(self, event: MutationEvent, record: Any, previous: Any = None) -> Tuple[Any, ...]:
        """Run every hook for ``event``; return the non-None results."""
        outcome = MutationOutcome(event=event, record=record, previous=previous)
        results = []
        for hook in self.hooks_for(event):
            try:
                result = hook(outcome)
            except Exception:
                logger.exception(
                    "Hook %s failed for %s on record %s",
                    getattr(hook, '__qualname__', repr(hook)),
                    event.value,
                    getattr(record, 'id', None),
                )
                continue
            if result is not None:
                results.append(result)
        return tuple(results)
