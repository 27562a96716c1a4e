"""
Audio playback channel backed by pygame.mixer.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

import pygame

from engine.core.events import EventBus, AudioEvent

logger = logging.getLogger(__name__)


class AudioManager:
    """
    Plays one-shot clips for the dialogue engine.

    Handles:
    - Mixer initialization
    - Clip caching
    - Volume categories (master, voice, sfx, ...)
    - Simple stereo panning for clips anchored at a world position
    """

    def __init__(self, event_bus: EventBus | None = None, base_path: str | Path = ""):
        self.event_bus = event_bus
        self.base_path = Path(base_path)

        self._master_volume: float = 1.0
        self._category_volumes: dict[str, float] = {
            "voice": 1.0,
            "sfx": 1.0,
            "ui": 1.0,
        }

        self._sound_cache: dict[str, pygame.mixer.Sound] = {}
        self._listener_pos: tuple[float, float] = (0.0, 0.0)
        self._initialized: bool = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def init(self, frequency: int = 44100, size: int = -16, channels: int = 2, buffer: int = 512) -> None:
        """Initialize the mixer. Safe to call more than once."""
        if pygame.mixer.get_init():
            self._initialized = True
            return

        try:
            pygame.mixer.init(frequency=frequency, size=size, channels=channels, buffer=buffer)
            pygame.mixer.set_num_channels(16)
            self._initialized = True
            logger.info("Audio system initialized.")
        except pygame.error as e:
            logger.error(f"Failed to initialize audio system: {e}")

    def quit(self) -> None:
        """Shut the mixer down and drop cached clips."""
        pygame.mixer.quit()
        self._sound_cache.clear()
        self._initialized = False

    # --- Volume ---

    def set_master_volume(self, volume: float) -> None:
        """Set master volume (0.0 to 1.0)."""
        self._master_volume = max(0.0, min(1.0, volume))

    def set_category_volume(self, category: str, volume: float) -> None:
        """Set volume for a category, creating it if needed."""
        self._category_volumes[category] = max(0.0, min(1.0, volume))

    def get_volume(self, category: str) -> float:
        """Effective volume for a category (master * category)."""
        return self._master_volume * self._category_volumes.get(category, 1.0)

    def set_listener_position(self, pos: tuple[float, float]) -> None:
        """Update the listener position (e.g. from camera/player)."""
        self._listener_pos = pos

    # --- Playback ---

    def _get_sound(self, clip: str) -> pygame.mixer.Sound | None:
        """Load or retrieve a clip from cache."""
        if not self._initialized:
            logger.warning(f"Audio system not initialized; skipping {clip}")
            return None

        if clip not in self._sound_cache:
            path = self.base_path / clip
            if not path.exists():
                logger.warning(f"Audio file not found: {path}")
                return None
            try:
                self._sound_cache[clip] = pygame.mixer.Sound(str(path))
            except pygame.error as e:
                logger.error(f"Failed to load sound {path}: {e}")
                return None

        return self._sound_cache[clip]

    def play_clip(
        self,
        clip: str,
        category: str = "sfx",
        position: tuple[float, float] | None = None,
        volume: float = 1.0,
    ) -> pygame.mixer.Channel | None:
        """
        Play a clip once.

        Args:
            clip: Clip path, relative to base_path
            category: Volume category
            position: World position for panning, or None for centered
            volume: Extra volume multiplier

        Returns:
            The channel used, or None if playback was not possible
        """
        sound = self._get_sound(clip)
        if not sound:
            return None

        channel = pygame.mixer.find_channel() or pygame.mixer.find_channel(True)
        if not channel:
            return None

        final_vol = self.get_volume(category) * volume
        if position is not None:
            left, right = self._calculate_spatial_volume(position, self._listener_pos)
            channel.set_volume(final_vol * left, final_vol * right)
        else:
            channel.set_volume(final_vol)

        channel.play(sound)

        if self.event_bus:
            self.event_bus.publish(AudioEvent.SFX_PLAYED, clip=clip, category=category)

        return channel

    def _calculate_spatial_volume(
        self,
        source_pos: tuple[float, float],
        listener_pos: tuple[float, float],
        max_dist: float = 500.0,
        pan_width: float = 300.0,
    ) -> tuple[float, float]:
        """Linear falloff and balance panning. Returns (left, right)."""
        dx = source_pos[0] - listener_pos[0]
        dy = source_pos[1] - listener_pos[1]

        dist = math.hypot(dx, dy)
        if dist > max_dist:
            return (0.0, 0.0)

        falloff = 1.0 - (dist / max_dist)
        pan = max(-1.0, min(1.0, dx / pan_width))

        left_pan = 1.0 if pan <= 0 else 1.0 - pan
        right_pan = 1.0 if pan >= 0 else 1.0 + pan

        return (left_pan * falloff, right_pan * falloff)
