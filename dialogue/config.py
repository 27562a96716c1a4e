"""
Dialogue engine configuration.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class DialogueConfig:
    """
    Global dialogue settings.

    Attributes:
        play_audio_from_manager: Play line and effect audio through the
            manager's AudioManager. When False the manager publishes
            AUDIO_CLIP_PLAYED / LINE_SOUND_EFFECT_PLAYED instead.
        voice_category: AudioManager volume category for line audio
        effect_category: AudioManager volume category for effect audio
        default_trigger_tag: Trigger tag given to actors built from config
        use_trigger_to_interact: Whether actors built from config start
            not ready and wait for a trigger-enter
        play_vfx_on_actor_position: Anchor visual effects at the actor
    """
    play_audio_from_manager: bool = True
    voice_category: str = "voice"
    effect_category: str = "sfx"
    default_trigger_tag: str = "Player"
    use_trigger_to_interact: bool = True
    play_vfx_on_actor_position: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DialogueConfig:
        """Build a config from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown dialogue config keys: {sorted(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def load(cls, path: str | Path) -> DialogueConfig:
        """
        Load configuration from a JSON file.

        Expected format:
        {
            "play_audio_from_manager": false,
            "voice_category": "voice",
            "default_trigger_tag": "Player"
        }

        Returns defaults when the file does not exist.
        """
        config_file = Path(path)
        if not config_file.exists():
            logger.info(f"Dialogue config not found, using defaults: {config_file}")
            return cls()

        with open(config_file, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def save(self, path: str | Path) -> None:
        """Write configuration to a JSON file."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2)
