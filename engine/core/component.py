"""
Pydantic base classes for data containers.

Two flavours:
- Asset: authored, immutable data (dialogues, actor profiles, ...).
  Frozen after validation, safe to share between sessions.
- Component: mutable runtime state attached to a runtime object
  (an actor's interaction gate, for example). Validated on assignment.

Neither carries behaviour beyond trivial queries; the logic that mutates
or traverses them lives in the managers.

Usage:
    @register_asset
    class Effect(Asset):
        sound_effect: str | None = None
        delay: float = 0.0

    effect = get_asset_type("Effect").model_validate({"delay": 0.5})
"""

from __future__ import annotations

from typing import ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for mutable runtime state.

    Pydantic gives us validation on assignment, defaults and a readable
    repr for free.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra='forbid',
    )


class Asset(BaseModel):
    """
    Base class for authored, read-only data.

    Assets are frozen: runtime code can hash them, share them and hold
    references to them without worrying about mutation.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
    )

    # Name used in data files and the registry; defaults to the class name
    _type_name: ClassVar[str] = ""

    @classmethod
    def get_type_name(cls) -> str:
        return cls._type_name or cls.__name__


A = TypeVar("A", bound=type[Asset])

_asset_registry: dict[str, type[Asset]] = {}


def register_asset(cls: A) -> A:
    """Class decorator registering an asset type under its type name."""
    _asset_registry[cls.get_type_name()] = cls
    return cls


def get_asset_type(type_name: str) -> type[Asset] | None:
    """Get an asset class by type name."""
    return _asset_registry.get(type_name)
