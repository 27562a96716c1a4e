"""
Condition evaluators for actor interaction and dialogue start.

Authored data names its conditions; the game registers the objects that
answer them. The engine only relies on evaluate() -> bool.

Usage:
    conditions = ConditionRegistry()
    conditions.register("met_mayor", lambda: flags.get("met_mayor", False))

    can_start(dialogue, conditions)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Union

if TYPE_CHECKING:
    from dialogue.graph import ActorProfile, Dialogue

logger = logging.getLogger(__name__)


class Condition(ABC):
    """A predicate that can be evaluated now."""

    @abstractmethod
    def evaluate(self) -> bool:
        """Return True if the condition currently holds."""


class PredicateCondition(Condition):
    """Condition backed by a zero-argument callable."""

    def __init__(self, predicate: Callable[[], bool], name: str = ""):
        self.predicate = predicate
        self.name = name or getattr(predicate, "__name__", "predicate")

    def evaluate(self) -> bool:
        return bool(self.predicate())

    def __repr__(self) -> str:
        return f"PredicateCondition({self.name!r})"


ConditionLike = Union[Condition, Callable[[], bool]]


class ConditionRegistry:
    """Maps condition names used in authored data to condition objects."""

    def __init__(self, conditions: dict[str, ConditionLike] | None = None):
        self._conditions: dict[str, Condition] = {}
        for name, condition in (conditions or {}).items():
            self.register(name, condition)

    def register(self, name: str, condition: ConditionLike) -> Condition:
        """Register a condition; plain callables are wrapped."""
        if not isinstance(condition, Condition):
            if not callable(condition):
                raise TypeError(f"Condition '{name}' must be a Condition or a callable")
            condition = PredicateCondition(condition, name)
        self._conditions[name] = condition
        return condition

    def unregister(self, name: str) -> None:
        self._conditions.pop(name, None)

    def get(self, name: str) -> Condition | None:
        return self._conditions.get(name)

    def evaluate(self, name: str) -> bool:
        """
        Evaluate one named condition.

        A name with no registered condition counts as unsatisfied.
        """
        condition = self._conditions.get(name)
        if condition is None:
            logger.error(f"Condition not registered: {name}")
            return False
        return condition.evaluate()

    def __contains__(self, name: str) -> bool:
        return name in self._conditions

    def __len__(self) -> int:
        return len(self._conditions)


class ConditionCache:
    """
    Names of interaction conditions already confirmed true.

    Entries are sticky: a cached condition is not evaluated again, even if
    it would now fail, until clear() is called.
    """

    def __init__(self, names: Iterable[str] = ()):
        self._names: set[str] = set(names)

    def contains(self, name: str) -> bool:
        return name in self._names

    def add(self, name: str) -> None:
        self._names.add(name)

    def clear(self) -> None:
        self._names.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def __len__(self) -> int:
        return len(self._names)


def can_interact(
    profile: ActorProfile,
    cache: ConditionCache,
    registry: ConditionRegistry,
) -> bool:
    """
    Check an actor profile's interaction conditions in order.

    Stops at the first failure. When the profile enables caching, cached
    names are skipped and newly passing ones are cached; failures are
    never cached.
    """
    for name in profile.interaction_conditions:
        if profile.use_interaction_cache:
            if name in cache:
                continue
            if not registry.evaluate(name):
                return False
            cache.add(name)
        elif not registry.evaluate(name):
            return False

    return True


def can_start(dialogue: Dialogue, registry: ConditionRegistry) -> bool:
    """Check a dialogue's start conditions in order, without caching."""
    for name in dialogue.start_conditions:
        if not registry.evaluate(name):
            return False
    return True
