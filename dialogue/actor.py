"""
Actors - interactable characters that request dialogues.

An actor never plays anything itself. It checks its interaction gate and
conditions, then publishes START_REQUESTED; the DialogueManager decides
whether a session actually begins.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from engine.core.component import Component
from engine.core.events import Event, EventBus
from dialogue.conditions import ConditionCache, ConditionRegistry, can_interact, can_start
from dialogue.config import DialogueConfig
from dialogue.events import DialogueEvent
from dialogue.graph import ActorProfile, Dialogue, DialogueGraph

logger = logging.getLogger(__name__)


class InteractionGate(Component):
    """
    Per-actor "ready for interaction" flag.

    Attributes:
        trigger_tag: Tag of the object whose trigger enter/exit toggles
            readiness
        use_trigger_to_interact: If True the gate starts closed and only
            opens while a matching trigger is inside
        ready: Current readiness
    """
    trigger_tag: str = "Player"
    use_trigger_to_interact: bool = True
    ready: Optional[bool] = None

    def model_post_init(self, __context) -> None:
        if self.ready is None:
            self.ready = not self.use_trigger_to_interact


class Actor:
    """
    Runtime actor bound to an authored ActorProfile.

    Usage:
        guide = Actor(graph.get_actor("guide"), graph, event_bus, conditions)
        guide.on_trigger_enter("Player")
        guide.try_start_dialogue("intro")
    """

    def __init__(
        self,
        profile: ActorProfile,
        graph: DialogueGraph,
        event_bus: EventBus,
        conditions: Optional[ConditionRegistry] = None,
        actor_id: Optional[str] = None,
        trigger_tag: str = "Player",
        use_trigger_to_interact: bool = True,
        position: tuple[float, float] = (0.0, 0.0),
    ):
        self.profile = profile
        self.graph = graph
        self.event_bus = event_bus
        self.conditions = conditions or ConditionRegistry()
        self.id = actor_id or profile.id
        self.position = position

        self.gate = InteractionGate(
            trigger_tag=trigger_tag,
            use_trigger_to_interact=use_trigger_to_interact,
        )
        self.condition_cache = ConditionCache()
        self._in_dialogue = False
        self._attached = False

    @classmethod
    def from_config(
        cls,
        profile: ActorProfile,
        graph: DialogueGraph,
        event_bus: EventBus,
        config: DialogueConfig,
        conditions: Optional[ConditionRegistry] = None,
        **kwargs,
    ) -> Actor:
        """Build an actor using the config's trigger defaults."""
        return cls(
            profile,
            graph,
            event_bus,
            conditions,
            trigger_tag=config.default_trigger_tag,
            use_trigger_to_interact=config.use_trigger_to_interact,
            **kwargs,
        )

    # Lifetime

    def attach(self) -> None:
        """Start tracking whether this actor is in a dialogue."""
        if self._attached:
            return
        self.event_bus.subscribe(DialogueEvent.STARTED, self._on_dialogue_started)
        self.event_bus.subscribe(DialogueEvent.ENDED, self._on_dialogue_ended)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        self.event_bus.unsubscribe(DialogueEvent.STARTED, self._on_dialogue_started)
        self.event_bus.unsubscribe(DialogueEvent.ENDED, self._on_dialogue_ended)
        self._attached = False

    def _on_dialogue_started(self, event: Event) -> None:
        if event.get("actor") is self:
            self._in_dialogue = True

    def _on_dialogue_ended(self, event: Event) -> None:
        if event.get("actor") is self:
            self._in_dialogue = False

    @property
    def in_dialogue(self) -> bool:
        """True between this actor's STARTED and ENDED events (needs attach())."""
        return self._in_dialogue

    # Interaction gate

    @property
    def is_ready(self) -> bool:
        return bool(self.gate.ready)

    def set_ready(self, ready: bool) -> Actor:
        self.gate.ready = ready
        return self

    def on_trigger_enter(self, tag: str) -> None:
        """Called by the proximity collaborator when something enters the trigger."""
        if self.gate.use_trigger_to_interact and tag == self.gate.trigger_tag:
            self.gate.ready = True

    def on_trigger_exit(self, tag: str) -> None:
        """Called by the proximity collaborator when something leaves the trigger."""
        if self.gate.use_trigger_to_interact and tag == self.gate.trigger_tag:
            self.gate.ready = False

    # Conditions

    def can_interact(self) -> bool:
        """Evaluate the profile's interaction conditions (gate not included)."""
        return can_interact(self.profile, self.condition_cache, self.conditions)

    def clear_condition_cache(self) -> None:
        self.condition_cache.clear()

    # Dialogue requests

    def try_start_dialogue(self, dialogue: Union[str, Dialogue]) -> bool:
        """
        Ask the dialogue manager to start one of this actor's dialogues.

        Returns:
            True if a start request was published. The manager may still
            reject it if another dialogue is active.
        """
        if not self.is_ready:
            logger.debug(f"Actor '{self.id}' is not ready for interaction")
            return False
        if not self.can_interact():
            logger.debug(f"Actor '{self.id}' interaction conditions not met")
            return False

        dialogue_id = dialogue.id if isinstance(dialogue, Dialogue) else dialogue
        resolved = self.graph.get_actor_dialogue(self.profile, dialogue_id)
        if resolved is None:
            logger.error(f"Dialogue with ID {dialogue_id} not found for actor '{self.id}'")
            return False

        return self._request(resolved)

    def play_default_dialogue(self) -> Optional[Dialogue]:
        """
        Request the profile's default dialogue.

        Returns:
            The requested dialogue, or None if nothing was requested
        """
        if not self.is_ready or not self.can_interact():
            return None

        dialogue = self.graph.default_dialogue(self.profile)
        if dialogue is None:
            logger.error(f"No available dialogues in actor '{self.id}' profile")
            return None

        return dialogue if self._request(dialogue) else None

    def _request(self, dialogue: Dialogue) -> bool:
        if not can_start(dialogue, self.conditions):
            logger.debug(f"Start conditions not met for dialogue '{dialogue.id}'")
            return False

        self.event_bus.publish(DialogueEvent.START_REQUESTED, actor=self, dialogue=dialogue)
        return True

    # Fluent setters

    def set_profile(self, profile: ActorProfile) -> Actor:
        """Swap authored data; cached conditions belong to the old profile."""
        self.profile = profile
        self.condition_cache.clear()
        return self

    def set_trigger_tag(self, trigger_tag: str) -> Actor:
        self.gate.trigger_tag = trigger_tag
        return self

    def set_use_trigger_to_interact(self, use_trigger: bool) -> Actor:
        self.gate.use_trigger_to_interact = use_trigger
        return self

    def __repr__(self) -> str:
        return f"Actor(id={self.id!r}, ready={self.is_ready})"
