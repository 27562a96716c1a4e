from typing import ClassVar

import pytest
from pydantic import ValidationError
from engine.core.component import Asset, Component, get_asset_type, register_asset


@register_asset
class Marker(Asset):
    label: str = ""


@register_asset
class RenamedMarker(Asset):
    _type_name: ClassVar[str] = "marker_v2"
    label: str = ""


class Counter(Component):
    value: int = 0


def test_registered_asset_lookup():
    assert get_asset_type("Marker") is Marker
    assert get_asset_type("marker_v2") is RenamedMarker
    assert get_asset_type("RenamedMarker") is None
    assert get_asset_type("Unknown") is None

def test_dialogue_models_are_registered():
    from dialogue.graph import ActorProfile, Dialogue
    assert get_asset_type("Dialogue") is Dialogue
    assert get_asset_type("ActorProfile") is ActorProfile

def test_asset_is_frozen():
    marker = Marker(label="a")
    with pytest.raises(ValidationError):
        marker.label = "b"

def test_asset_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        Marker(label="a", colour="red")

def test_component_validates_assignment():
    counter = Counter()
    counter.value = 3
    assert counter.value == 3

    with pytest.raises(ValidationError):
        counter.value = "many"
