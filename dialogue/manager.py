"""
Dialogue manager - the single active dialogue session.

Plays lines in order, hands effects to the EffectScheduler, schedules
auto-advance for timed lines, offers choices and follows next-dialogue
links until the graph runs out.

State machine:

    IDLE --request_start--> PLAYING_LINE
    PLAYING_LINE --continue--> PLAYING_LINE      (next line)
                           --> AWAITING_CHOICE   (no more lines, has choices)
                           --> PLAYING_LINE      (next dialogue, new session)
                           --> ENDING --> IDLE   (nothing left)
    AWAITING_CHOICE --select_choice--> PLAYING_LINE (new session) | ENDING

Misuse (continuing while idle, starting while a dialogue is active) is
logged and ignored; public methods never raise for it.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional, Union

from engine.core.events import Event, EventBus
from engine.core.timers import TimerHandle, TimerScheduler
from dialogue.config import DialogueConfig
from dialogue.effects import EffectScheduler
from dialogue.errors import ConfigurationError
from dialogue.events import DialogueEvent
from dialogue.graph import Choice, Dialogue, DialogueGraph, Line

if TYPE_CHECKING:
    from engine.audio.manager import AudioManager
    from dialogue.actor import Actor

logger = logging.getLogger(__name__)


class DialogueState(Enum):
    """Playback state of the manager."""
    IDLE = auto()
    PLAYING_LINE = auto()
    AWAITING_CHOICE = auto()
    ENDING = auto()


_session_ids = itertools.count(1)


@dataclass(eq=False)
class Session:
    """
    Runtime record of the dialogue being played.

    The token identifies the session for timer cancellation; it is never
    reused, so timers from an earlier session can always be told apart.
    """
    actor: Actor
    dialogue: Dialogue
    line_index: int = 0
    token: int = field(default_factory=lambda: next(_session_ids))
    advance_timer: Optional[TimerHandle] = None

    @property
    def line(self) -> Optional[Line]:
        if 0 <= self.line_index < len(self.dialogue.lines):
            return self.dialogue.lines[self.line_index]
        return None


class DialogueManager:
    """
    Owns the one active dialogue session.

    Usage:
        manager = DialogueManager(event_bus, graph, timers, audio=audio)
        manager.attach()  # listen for actor start requests

        guide.try_start_dialogue("intro")
        manager.continue_dialogue()

        # each frame
        manager.update(dt)
    """

    def __init__(
        self,
        event_bus: EventBus,
        graph: DialogueGraph,
        scheduler: Optional[TimerScheduler] = None,
        audio: Optional[AudioManager] = None,
        config: Optional[DialogueConfig] = None,
    ):
        self.event_bus = event_bus
        self.graph = graph
        self.scheduler = scheduler or TimerScheduler()
        self.audio = audio
        self.config = config or DialogueConfig()

        if self.config.play_audio_from_manager and self.audio is None:
            raise ConfigurationError(
                "play_audio_from_manager is enabled but no AudioManager was given"
            )

        self.effects = EffectScheduler(
            self.scheduler,
            event_bus,
            audio=audio,
            play_audio_from_manager=self.config.play_audio_from_manager,
            category=self.config.effect_category,
            is_current=self._is_current,
        )

        self._state = DialogueState.IDLE
        self._session: Optional[Session] = None
        self._attached = False

    # Lifetime

    def attach(self) -> None:
        """Listen for actor start requests and announce readiness."""
        if not self._attached:
            self.event_bus.subscribe(DialogueEvent.START_REQUESTED, self._on_start_requested)
            self._attached = True
        self.event_bus.publish(DialogueEvent.MANAGER_READY, manager=self)

    def detach(self) -> None:
        """Stop listening for start requests. An active dialogue keeps running."""
        if self._attached:
            self.event_bus.unsubscribe(DialogueEvent.START_REQUESTED, self._on_start_requested)
            self._attached = False

    def update(self, dt: float) -> None:
        """Advance timed work (auto-advance, effects) by dt seconds."""
        self.scheduler.update(dt)

    def _on_start_requested(self, event: Event) -> None:
        self.request_start(event["actor"], event["dialogue"])

    # State queries

    @property
    def state(self) -> DialogueState:
        return self._state

    @property
    def is_dialogue_active(self) -> bool:
        return self._session is not None

    @property
    def current_actor(self) -> Optional[Actor]:
        return self._session.actor if self._session else None

    @property
    def current_dialogue(self) -> Optional[Dialogue]:
        return self._session.dialogue if self._session else None

    @property
    def current_line_index(self) -> int:
        return self._session.line_index if self._session else 0

    @property
    def current_line(self) -> Optional[Line]:
        return self._session.line if self._session else None

    def _is_current(self, token: int) -> bool:
        return self._session is not None and self._session.token == token

    # Dialogue flow

    def request_start(self, actor: Actor, dialogue: Union[str, Dialogue]) -> bool:
        """
        Start a dialogue for an actor.

        Args:
            actor: The actor speaking
            dialogue: Dialogue or dialogue id

        Returns:
            True if the dialogue started
        """
        if self._state != DialogueState.IDLE:
            logger.warning("A dialogue is already active")
            return False

        resolved = self._resolve(dialogue)
        if resolved is None:
            return False

        self._begin(actor, resolved)
        return True

    def continue_dialogue(self) -> None:
        """Advance to the next line, the choices, the next dialogue, or the end."""
        session = self._session
        if session is None or self._state in (DialogueState.IDLE, DialogueState.ENDING):
            logger.warning("No dialogue is active")
            return

        if self._state == DialogueState.AWAITING_CHOICE:
            # Choices are already up; just announce them again
            self.event_bus.publish(
                DialogueEvent.CHOICE_SELECTION_READY,
                dialogue=session.dialogue,
            )
            return

        if session.advance_timer is not None:
            session.advance_timer.cancel()
            session.advance_timer = None

        session.line_index += 1
        dialogue = session.dialogue

        if session.line_index < len(dialogue.lines):
            line = dialogue.lines[session.line_index]
            self.event_bus.publish(
                DialogueEvent.PROGRESSED,
                actor=session.actor,
                dialogue=dialogue,
                line=line,
            )
            self._play_line(session, line)
        elif dialogue.has_choices:
            session.line_index = len(dialogue.lines)
            self._state = DialogueState.AWAITING_CHOICE
            self.event_bus.publish(DialogueEvent.CHOICE_SELECTION_READY, dialogue=dialogue)
        elif dialogue.next_dialogue is not None:
            self._chain(dialogue.next_dialogue)
        else:
            self.end_dialogue()

    def select_choice(self, choice: Union[int, Choice]) -> None:
        """
        Pick one of the current dialogue's choices.

        Args:
            choice: The Choice itself or its index in the dialogue
        """
        session = self._session
        if session is None or self._state != DialogueState.AWAITING_CHOICE:
            logger.warning("No choice selection is pending")
            return

        choices = session.dialogue.choices
        if isinstance(choice, int):
            if not 0 <= choice < len(choices):
                logger.warning(f"Choice index {choice} out of range for '{session.dialogue.id}'")
                return
            choice = choices[choice]
        elif choice not in choices:
            logger.warning(f"Choice {choice!r} is not offered by '{session.dialogue.id}'")
            return

        self.event_bus.publish(
            DialogueEvent.CHOICE_SELECTED,
            actor=session.actor,
            choice=choice,
            next_dialogue=self.graph.resolve_choice(choice),
        )

        if choice.next_dialogue is not None:
            self._chain(choice.next_dialogue)
        elif session.dialogue.next_dialogue is not None:
            self._chain(session.dialogue.next_dialogue)
        else:
            self.end_dialogue()

    def end_dialogue(self) -> None:
        """End the active dialogue and cancel everything it scheduled."""
        session = self._session
        if session is None or self._state == DialogueState.ENDING:
            logger.warning("No dialogue is active")
            return

        self._state = DialogueState.ENDING
        self._cancel_session_timers(session)

        self.event_bus.publish(
            DialogueEvent.ENDED,
            actor=session.actor,
            dialogue=session.dialogue,
        )

        self._session = None
        self._state = DialogueState.IDLE

    # Internals

    def _resolve(self, dialogue: Union[str, Dialogue]) -> Optional[Dialogue]:
        if isinstance(dialogue, Dialogue):
            resolved = dialogue
        else:
            resolved = self.graph.get_dialogue(dialogue)
            if resolved is None:
                logger.error(f"Dialogue not found: {dialogue}")
                return None

        if not resolved.lines:
            logger.error(f"Dialogue '{resolved.id}' has no lines")
            return None

        return resolved

    def _begin(self, actor: Actor, dialogue: Dialogue) -> None:
        session = Session(actor=actor, dialogue=dialogue)
        self._session = session
        self._state = DialogueState.PLAYING_LINE

        self.event_bus.publish(DialogueEvent.STARTED, actor=actor, dialogue=dialogue)
        self._play_line(session, dialogue.lines[0])

    def _chain(self, dialogue_id: str) -> None:
        """Replace the current session with one for the linked dialogue."""
        session = self._session
        dialogue = self._resolve(dialogue_id)
        if dialogue is None:
            self.end_dialogue()
            return

        self._cancel_session_timers(session)
        self._session = None
        self._state = DialogueState.IDLE
        self._begin(session.actor, dialogue)

    def _play_line(self, session: Session, line: Line) -> None:
        if line.audio_clip:
            if self.config.play_audio_from_manager:
                self.audio.play_clip(line.audio_clip, category=self.config.voice_category)
            else:
                self.event_bus.publish(DialogueEvent.AUDIO_CLIP_PLAYED, clip=line.audio_clip)

        for effect in line.effects:
            self.effects.schedule(effect, session.actor, session.token)

        if line.auto_advances:
            line_index = session.line_index
            session.advance_timer = self.scheduler.schedule(
                line.display_duration,
                lambda: self._auto_continue(session.token, line_index),
                group=session.token,
            )

    def _auto_continue(self, token: int, line_index: int) -> None:
        session = self._session
        if session is None or session.token != token or session.line_index != line_index:
            return
        session.advance_timer = None
        self.continue_dialogue()

    def _cancel_session_timers(self, session: Session) -> None:
        session.advance_timer = None
        self.scheduler.cancel_group(session.token)
