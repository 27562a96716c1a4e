"""
Dialogue events published on the EventBus.

Payload keys per event:
    START_REQUESTED           actor, dialogue
    STARTED                   actor, dialogue
    PROGRESSED                actor, dialogue, line
    ENDED                     actor, dialogue
    CHOICE_SELECTION_READY    dialogue
    CHOICE_SELECTED           actor, choice, next_dialogue
    AUDIO_CLIP_PLAYED         clip
    LINE_SOUND_EFFECT_PLAYED  clip
    LINE_VISUAL_EFFECT_PLAYED actor, visual_effect, duration
    MANAGER_READY             manager
"""

from enum import Enum, auto


class DialogueEvent(Enum):
    """Dialogue lifecycle and playback events."""
    # Requests (actor -> manager)
    START_REQUESTED = auto()

    # Lifecycle
    STARTED = auto()
    PROGRESSED = auto()
    ENDED = auto()
    MANAGER_READY = auto()

    # Choices
    CHOICE_SELECTION_READY = auto()
    CHOICE_SELECTED = auto()

    # Delegated playback (only when the manager does not own the audio)
    AUDIO_CLIP_PLAYED = auto()
    LINE_SOUND_EFFECT_PLAYED = auto()

    # Renderer-side effects
    LINE_VISUAL_EFFECT_PLAYED = auto()
