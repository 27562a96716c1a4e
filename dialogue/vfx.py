"""
Bridges line visual effects to whatever spawns them on screen.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from engine.core.events import Event, EventBus
from dialogue.config import DialogueConfig
from dialogue.events import DialogueEvent

# (visual_effect, position or None, duration) -> anything
VFXSpawner = Callable[[str, Optional[tuple[float, float]], float], Any]


class LineVFXDispatcher:
    """
    Listens for LINE_VISUAL_EFFECT_PLAYED and spawns the effect.

    With play_on_actor_position the effect is anchored at the speaking
    actor; otherwise the spawner gets None and uses the payload's own
    placement.
    """

    def __init__(
        self,
        event_bus: EventBus,
        spawner: VFXSpawner,
        play_on_actor_position: bool = True,
    ):
        self.event_bus = event_bus
        self.spawner = spawner
        self.play_on_actor_position = play_on_actor_position
        self._attached = False

    @classmethod
    def from_config(
        cls,
        event_bus: EventBus,
        spawner: VFXSpawner,
        config: DialogueConfig,
    ) -> LineVFXDispatcher:
        """Build a dispatcher anchored as the config says."""
        return cls(event_bus, spawner, play_on_actor_position=config.play_vfx_on_actor_position)

    def attach(self) -> None:
        if not self._attached:
            self.event_bus.subscribe(DialogueEvent.LINE_VISUAL_EFFECT_PLAYED, self._on_visual_effect)
            self._attached = True

    def detach(self) -> None:
        if self._attached:
            self.event_bus.unsubscribe(DialogueEvent.LINE_VISUAL_EFFECT_PLAYED, self._on_visual_effect)
            self._attached = False

    def _on_visual_effect(self, event: Event) -> None:
        actor = event.get("actor")
        position = None
        if self.play_on_actor_position and actor is not None:
            position = actor.position
        self.spawner(event["visual_effect"], position, event.get("duration", -1.0))
