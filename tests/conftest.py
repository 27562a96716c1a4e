import os
import sys
import pytest
from unittest.mock import MagicMock, patch

# Ensure engine modules can be imported
sys.path.append(os.getcwd())

from engine.core.events import EventBus
from engine.core.timers import TimerScheduler
from dialogue.config import DialogueConfig
from dialogue.conditions import ConditionRegistry
from dialogue.events import DialogueEvent
from dialogue.graph import ActorProfile, Choice, Dialogue, DialogueGraph, Effect, Line


@pytest.fixture(autouse=True)
def mock_pygame():
    """
    Global mock for the pygame mixer to allow headless testing.
    Autoused for all tests so no audio device is ever opened.
    """
    with patch('pygame.init'), patch('pygame.mixer'):
        yield


class EventRecorder:
    """Collects every dialogue event published on a bus."""

    def __init__(self, bus: EventBus):
        self.events = []
        for event_type in DialogueEvent:
            bus.subscribe(event_type, self.events.append, weak=False)

    @property
    def types(self):
        return [e.type for e in self.events]

    def of(self, event_type):
        return [e for e in self.events if e.type == event_type]

    def count(self, event_type):
        return len(self.of(event_type))

    def clear(self):
        self.events.clear()


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    return EventBus()


@pytest.fixture
def timers():
    """Fresh TimerScheduler for each test."""
    return TimerScheduler()


@pytest.fixture
def recorder(event_bus):
    return EventRecorder(event_bus)


@pytest.fixture
def conditions():
    return ConditionRegistry()


@pytest.fixture
def delegated_config():
    """Config where audio goes out as events instead of through an AudioManager."""
    return DialogueConfig(play_audio_from_manager=False)


@pytest.fixture
def graph():
    """
    Small graph covering every branch:

    greeting (3 lines) -> farewell
    question (1 line) -> choices [yes -> answer_yes, no -> (fallback) farewell]
    answer_yes (1 line, ends)
    farewell (1 line, ends)
    timed (2 lines, 2.0s each, ends)
    sparkle (1 line with two delayed effects)
    """
    return DialogueGraph(
        dialogues=[
            Dialogue(
                id="greeting",
                lines=[
                    Line(text="Hello.", audio_clip="voice/hello.ogg"),
                    Line(text="Nice weather."),
                    Line(text="Anyway."),
                ],
                next_dialogue="farewell",
            ),
            Dialogue(
                id="question",
                lines=[Line(text="Will you help?")],
                choices=[
                    Choice(text="Yes", next_dialogue="answer_yes"),
                    Choice(text="No"),
                ],
                next_dialogue="farewell",
            ),
            Dialogue(id="answer_yes", lines=[Line(text="Thank you!")]),
            Dialogue(id="farewell", lines=[Line(text="Goodbye.")]),
            Dialogue(
                id="timed",
                lines=[
                    Line(text="Tick.", display_duration=2.0),
                    Line(text="Tock.", display_duration=2.0),
                ],
            ),
            Dialogue(
                id="sparkle",
                lines=[
                    Line(
                        text="Behold!",
                        effects=[
                            Effect(sound_effect="sfx/chime.ogg", delay=1.0),
                            Effect(visual_effect="vfx/sparkle", duration=0.5, delay=0.5),
                        ],
                    ),
                ],
            ),
        ],
        actors=[
            ActorProfile(
                id="guide",
                name="Guide",
                dialogues=["greeting", "question", "answer_yes", "farewell", "timed", "sparkle"],
            ),
        ],
    )


@pytest.fixture
def actor(graph, event_bus, conditions):
    """Guide actor that does not need a trigger."""
    from dialogue.actor import Actor
    return Actor(
        graph.get_actor("guide"),
        graph,
        event_bus,
        conditions,
        use_trigger_to_interact=False,
        position=(10.0, 20.0),
    )


@pytest.fixture
def manager(event_bus, graph, timers, delegated_config):
    from dialogue.manager import DialogueManager
    mgr = DialogueManager(event_bus, graph, timers, config=delegated_config)
    mgr.attach()
    return mgr
