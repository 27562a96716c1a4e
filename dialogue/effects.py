"""
Delayed playback of line effects.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Hashable, Optional

from engine.core.events import EventBus
from engine.core.timers import TimerHandle, TimerScheduler
from dialogue.events import DialogueEvent
from dialogue.graph import Effect

if TYPE_CHECKING:
    from engine.audio.manager import AudioManager
    from dialogue.actor import Actor

logger = logging.getLogger(__name__)


class EffectScheduler:
    """
    Fires a line's effects after their delays.

    Each effect gets its own timer measured from the start of the line,
    so effects on one line overlap freely and keep running after the line
    changes. All timers are grouped under the session token and die with
    the session.
    """

    def __init__(
        self,
        scheduler: TimerScheduler,
        event_bus: EventBus,
        audio: Optional[AudioManager] = None,
        play_audio_from_manager: bool = True,
        category: str = "sfx",
        is_current: Optional[Callable[[Hashable], bool]] = None,
    ):
        self.scheduler = scheduler
        self.event_bus = event_bus
        self.audio = audio
        self.play_audio_from_manager = play_audio_from_manager
        self.category = category
        # token -> still the active session?
        self.is_current = is_current

    def schedule(self, effect: Effect, actor: Actor, token: Hashable) -> TimerHandle:
        """Schedule one effect for the session identified by token."""
        delay = max(effect.delay, 0.0)
        return self.scheduler.schedule(
            delay,
            lambda: self._fire(effect, actor, token),
            group=token,
        )

    def cancel(self, token: Hashable) -> int:
        """Cancel every pending effect of a session."""
        return self.scheduler.cancel_group(token)

    def _fire(self, effect: Effect, actor: Actor, token: Hashable) -> None:
        if self.is_current is not None and not self.is_current(token):
            logger.debug(f"Dropped effect from finished session {token!r}")
            return
        self.play(effect, actor)

    def play(self, effect: Effect, actor: Actor) -> None:
        """Play an effect immediately."""
        if effect.sound_effect:
            if self.play_audio_from_manager and self.audio is not None:
                self.audio.play_clip(
                    effect.sound_effect,
                    category=self.category,
                    position=actor.position,
                )
            else:
                self.event_bus.publish(
                    DialogueEvent.LINE_SOUND_EFFECT_PLAYED,
                    clip=effect.sound_effect,
                )

        if effect.visual_effect:
            self.event_bus.publish(
                DialogueEvent.LINE_VISUAL_EFFECT_PLAYED,
                actor=actor,
                visual_effect=effect.visual_effect,
                duration=effect.duration,
            )

        logger.debug(f"Played effect {effect!r} for actor '{actor.id}'")
