"""
Dialogue module - branching, timed conversations.

Provides:
- Authored data graph (actors, dialogues, lines, choices, effects)
- Interaction gate and condition evaluators
- The dialogue manager state machine
- Delayed line effects and the VFX dispatcher
- JSON data loading
"""

from dialogue.actor import Actor, InteractionGate
from dialogue.conditions import (
    Condition,
    PredicateCondition,
    ConditionRegistry,
    ConditionCache,
    can_interact,
    can_start,
)
from dialogue.config import DialogueConfig
from dialogue.database import DialogueDatabase
from dialogue.effects import EffectScheduler
from dialogue.errors import DialogueError, ConfigurationError, MissingDataError
from dialogue.events import DialogueEvent
from dialogue.graph import (
    ActorExpression,
    ActorProfile,
    Choice,
    Dialogue,
    DialogueGraph,
    Effect,
    Line,
)
from dialogue.manager import DialogueManager, DialogueState, Session
from dialogue.vfx import LineVFXDispatcher

__all__ = [
    # Data
    "ActorExpression",
    "ActorProfile",
    "Choice",
    "Dialogue",
    "DialogueGraph",
    "Effect",
    "Line",
    "DialogueDatabase",
    # Actors and conditions
    "Actor",
    "InteractionGate",
    "Condition",
    "PredicateCondition",
    "ConditionRegistry",
    "ConditionCache",
    "can_interact",
    "can_start",
    # Playback
    "DialogueManager",
    "DialogueState",
    "Session",
    "EffectScheduler",
    "LineVFXDispatcher",
    "DialogueEvent",
    "DialogueConfig",
    # Errors
    "DialogueError",
    "ConfigurationError",
    "MissingDataError",
]
