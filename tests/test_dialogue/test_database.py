import json
import pytest
from dialogue.database import DialogueDatabase
from dialogue.errors import ConfigurationError, MissingDataError

@pytest.fixture
def mock_db_path(tmp_path):
    # Setup mock directory structure in tmp_path
    schemas = tmp_path / "schemas"
    schemas.mkdir()

    database = tmp_path / "database"
    database.mkdir()
    for folder in ("dialogues", "actors", "expressions"):
        (database / folder).mkdir()

    dialogue_schema = {
        "type": "object",
        "required": ["id", "lines"],
        "properties": {
            "id": {"type": "string"},
            "lines": {"type": "array", "minItems": 1},
        },
    }
    with open(schemas / "dialogue.schema.json", "w") as f:
        json.dump(dialogue_schema, f)

    return tmp_path

def write(path, data):
    with open(path, "w") as f:
        json.dump(data, f)

def test_load_all(mock_db_path):
    db_dir = mock_db_path / "database"
    write(db_dir / "dialogues" / "intro.json", [
        {
            "id": "intro",
            "lines": [
                {"text": "Hi", "audio_clip": "voice/hi.ogg", "expression": "guide_smile"},
                {"text": "Look!", "effects": [{"visual_effect": "vfx/spark", "delay": 0.5}]},
            ],
            "next_dialogue": "outro",
        },
        {"id": "outro", "lines": [{"text": "Bye", "display_duration": 2.0}]},
    ])
    write(db_dir / "actors" / "guide.json", {
        "id": "guide",
        "name": "Guide",
        "dialogues": ["intro", "outro"],
        "interaction_conditions": ["met_guide"],
    })
    write(db_dir / "expressions" / "guide.json", [
        {"id": "guide_smile", "actor_id": "guide", "sprite": "guide/smile.png"},
    ])

    db = DialogueDatabase(mock_db_path)
    graph = db.load_all(strict=True)

    assert "intro" in graph
    assert graph.get_dialogue("intro").lines[1].effects[0].delay == 0.5
    assert graph.resolve_next(graph.get_dialogue("intro")).id == "outro"
    assert graph.get_actor("guide").interaction_conditions == ("met_guide",)
    assert graph.get_expression("guide_smile").sprite == "guide/smile.png"

def test_schema_validation_error(mock_db_path):
    # No lines: rejected by the schema
    write(mock_db_path / "database" / "dialogues" / "broken.json", [{"id": "broken", "lines": []}])

    db = DialogueDatabase(mock_db_path)
    graph = db.load_all()

    assert "broken" not in graph

def test_model_validation_error(mock_db_path):
    (mock_db_path / "schemas" / "dialogue.schema.json").unlink()
    write(mock_db_path / "database" / "dialogues" / "bad.json", [
        {"id": "bad", "lines": [{"text": "x", "unknown_field": 1}]},
        {"id": "good", "lines": [{"text": "y"}]},
    ])

    db = DialogueDatabase(mock_db_path)
    graph = db.load_all()

    # Without schema the pydantic model still rejects unknown fields
    assert "bad" not in graph
    assert "good" in graph

def test_duplicate_ids_keep_first(mock_db_path):
    write(mock_db_path / "database" / "dialogues" / "a.json", {"id": "same", "lines": [{"text": "first"}]})
    write(mock_db_path / "database" / "dialogues" / "b.json", {"id": "same", "lines": [{"text": "second"}]})

    graph = DialogueDatabase(mock_db_path).load_all()

    assert graph.get_dialogue("same").lines[0].text == "first"

def test_invalid_json_is_skipped(mock_db_path):
    (mock_db_path / "database" / "dialogues" / "corrupt.json").write_text("{not json")
    write(mock_db_path / "database" / "dialogues" / "ok.json", {"id": "ok", "lines": [{"text": "fine"}]})

    graph = DialogueDatabase(mock_db_path).load_all()

    assert len(graph) == 1

def test_dangling_references(mock_db_path):
    write(mock_db_path / "database" / "dialogues" / "intro.json", {
        "id": "intro",
        "lines": [{"text": "Hi"}],
        "next_dialogue": "nowhere",
    })

    db = DialogueDatabase(mock_db_path)
    graph = db.load_all()
    assert "intro" in graph

    with pytest.raises(MissingDataError) as excinfo:
        db.load_all(strict=True)
    assert "nowhere" in str(excinfo.value)

def test_missing_directories(tmp_path):
    graph = DialogueDatabase(tmp_path).load_all()
    assert len(graph) == 0

def test_models_resolved_through_asset_registry(mock_db_path, monkeypatch):
    looked_up = []

    def lookup(type_name):
        looked_up.append(type_name)
        return None if type_name == "ActorProfile" else real_lookup(type_name)

    import dialogue.database
    real_lookup = dialogue.database.get_asset_type
    monkeypatch.setattr(dialogue.database, "get_asset_type", lookup)

    with pytest.raises(ConfigurationError):
        DialogueDatabase(mock_db_path).load_all()
    assert looked_up == ["ActorExpression", "Dialogue", "ActorProfile"]
