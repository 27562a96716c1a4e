from unittest.mock import MagicMock
from dialogue.config import DialogueConfig
from dialogue.events import DialogueEvent
from dialogue.vfx import LineVFXDispatcher


def publish_visual(event_bus, actor, **kwargs):
    event_bus.publish(
        DialogueEvent.LINE_VISUAL_EFFECT_PLAYED,
        actor=actor,
        visual_effect=kwargs.get("visual_effect", "vfx/sparkle"),
        duration=kwargs.get("duration", 0.5),
    )


def test_spawns_at_actor_position(event_bus, actor):
    spawner = MagicMock()
    dispatcher = LineVFXDispatcher(event_bus, spawner)
    dispatcher.attach()

    publish_visual(event_bus, actor)

    spawner.assert_called_once_with("vfx/sparkle", (10.0, 20.0), 0.5)

def test_spawns_without_anchor(event_bus, actor):
    spawner = MagicMock()
    dispatcher = LineVFXDispatcher(event_bus, spawner, play_on_actor_position=False)
    dispatcher.attach()

    publish_visual(event_bus, actor, duration=-1.0)

    spawner.assert_called_once_with("vfx/sparkle", None, -1.0)

def test_detach_stops_spawning(event_bus, actor):
    spawner = MagicMock()
    dispatcher = LineVFXDispatcher(event_bus, spawner)
    dispatcher.attach()
    dispatcher.attach()
    dispatcher.detach()

    publish_visual(event_bus, actor)

    spawner.assert_not_called()

def test_manager_effects_reach_spawner(manager, actor, event_bus):
    spawner = MagicMock()
    dispatcher = LineVFXDispatcher(event_bus, spawner)
    dispatcher.attach()

    manager.request_start(actor, "sparkle")
    manager.update(1.0)

    spawner.assert_called_once_with("vfx/sparkle", (10.0, 20.0), 0.5)

def test_from_config_without_anchor(event_bus, actor):
    spawner = MagicMock()
    config = DialogueConfig(play_vfx_on_actor_position=False)
    dispatcher = LineVFXDispatcher.from_config(event_bus, spawner, config)
    dispatcher.attach()

    publish_visual(event_bus, actor)

    spawner.assert_called_once_with("vfx/sparkle", None, 0.5)

def test_from_config_defaults_to_actor_position(event_bus, actor):
    spawner = MagicMock()
    dispatcher = LineVFXDispatcher.from_config(event_bus, spawner, DialogueConfig())
    dispatcher.attach()

    publish_visual(event_bus, actor)

    spawner.assert_called_once_with("vfx/sparkle", (10.0, 20.0), 0.5)
