"""
Core engine module.

Exports:
- EventBus, Event, AudioEvent: Event system
- TimerScheduler, TimerHandle: Cooperative timers
- Component, Asset, register_asset, get_asset_type: Pydantic data bases
"""

from engine.core.component import Component, Asset, register_asset, get_asset_type
from engine.core.events import EventBus, Event, AudioEvent
from engine.core.timers import TimerScheduler, TimerHandle

__all__ = [
    # Data
    "Component",
    "Asset",
    "register_asset",
    "get_asset_type",
    # Events
    "EventBus",
    "Event",
    "AudioEvent",
    # Timing
    "TimerScheduler",
    "TimerHandle",
]
