import pytest
from dialogue.conditions import (
    Condition,
    ConditionCache,
    ConditionRegistry,
    PredicateCondition,
    can_interact,
    can_start,
)
from dialogue.graph import ActorProfile, Dialogue, Line


class CountingCondition(Condition):
    """Condition whose result can be flipped, counting evaluations."""

    def __init__(self, result=True):
        self.result = result
        self.calls = 0

    def evaluate(self):
        self.calls += 1
        return self.result


def test_registry_wraps_callables():
    registry = ConditionRegistry({"always": lambda: True})

    assert "always" in registry
    assert isinstance(registry.get("always"), PredicateCondition)
    assert registry.evaluate("always") is True

def test_registry_rejects_non_callables():
    with pytest.raises(TypeError):
        ConditionRegistry().register("bad", 42)

def test_unknown_condition_fails(caplog):
    assert ConditionRegistry().evaluate("unknown") is False
    assert "Condition not registered: unknown" in caplog.text

def test_can_interact_with_no_conditions():
    assert can_interact(ActorProfile(id="a"), ConditionCache(), ConditionRegistry())

def test_can_interact_short_circuits_in_order():
    c1, c2 = CountingCondition(False), CountingCondition(True)
    registry = ConditionRegistry({"c1": c1, "c2": c2})
    profile = ActorProfile(id="a", interaction_conditions=["c1", "c2"])

    assert not can_interact(profile, ConditionCache(), registry)
    assert c1.calls == 1
    assert c2.calls == 0

def test_cache_stickiness():
    c1, c2 = CountingCondition(True), CountingCondition(True)
    registry = ConditionRegistry({"c1": c1, "c2": c2})
    profile = ActorProfile(id="a", interaction_conditions=["c1", "c2"])
    cache = ConditionCache()

    assert can_interact(profile, cache, registry)
    assert list(cache) == ["c1", "c2"]

    # Underlying source changes; cached result wins
    c1.result = False
    assert can_interact(profile, cache, registry)
    assert c1.calls == 1

    cache.clear()
    assert not can_interact(profile, cache, registry)
    assert c1.calls == 2

def test_failures_are_not_cached():
    c1, c2 = CountingCondition(True), CountingCondition(False)
    registry = ConditionRegistry({"c1": c1, "c2": c2})
    profile = ActorProfile(id="a", interaction_conditions=["c1", "c2"])
    cache = ConditionCache()

    assert not can_interact(profile, cache, registry)
    assert "c1" in cache
    assert "c2" not in cache

    c2.result = True
    assert can_interact(profile, cache, registry)
    assert c1.calls == 1
    assert c2.calls == 2

def test_cache_disabled_reevaluates():
    c1 = CountingCondition(True)
    registry = ConditionRegistry({"c1": c1})
    profile = ActorProfile(id="a", interaction_conditions=["c1"], use_interaction_cache=False)
    cache = ConditionCache()

    assert can_interact(profile, cache, registry)
    assert can_interact(profile, cache, registry)
    assert c1.calls == 2
    assert len(cache) == 0

    c1.result = False
    assert not can_interact(profile, cache, registry)

def test_can_start_is_not_cached():
    gate = CountingCondition(True)
    registry = ConditionRegistry({"gate": gate})
    dialogue = Dialogue(id="d", lines=[Line()], start_conditions=["gate"])

    assert can_start(dialogue, registry)
    assert can_start(dialogue, registry)
    assert gate.calls == 2

    gate.result = False
    assert not can_start(dialogue, registry)

def test_can_start_stops_at_first_failure():
    first, second = CountingCondition(False), CountingCondition(True)
    registry = ConditionRegistry({"first": first, "second": second})
    dialogue = Dialogue(id="d", lines=[Line()], start_conditions=["first", "second"])

    assert not can_start(dialogue, registry)
    assert second.calls == 0
