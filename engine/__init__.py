"""
Dialogue Engine - runtime infrastructure.

Event bus, cooperative timers, pydantic data bases, the audio channel and
the data loader that the dialogue package is built on.

Quick Start:
    from engine import EventBus, TimerScheduler
    from dialogue import DialogueManager, DialogueConfig

    bus = EventBus()
    timers = TimerScheduler()
    manager = DialogueManager(bus, graph, timers, config=DialogueConfig(play_audio_from_manager=False))
    manager.attach()

    # game loop
    manager.update(dt)
"""

__version__ = "0.1.0"

from engine.core import (
    Component,
    Asset,
    register_asset,
    EventBus,
    Event,
    AudioEvent,
    TimerScheduler,
    TimerHandle,
)

__all__ = [
    "Component",
    "Asset",
    "register_asset",
    "EventBus",
    "Event",
    "AudioEvent",
    "TimerScheduler",
    "TimerHandle",
]
