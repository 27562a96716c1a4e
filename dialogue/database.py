"""
Dialogue database.

Loads authored dialogue data (expressions, dialogues, actors) from JSON
files into a DialogueGraph.

Layout:
    <data_path>/schemas/expression.schema.json   (optional)
    <data_path>/schemas/dialogue.schema.json     (optional)
    <data_path>/schemas/actor.schema.json        (optional)
    <data_path>/database/expressions/*.json
    <data_path>/database/dialogues/*.json
    <data_path>/database/actors/*.json

Each file holds one object or a list of objects.
"""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema
from pydantic import ValidationError

from engine.core.component import Asset, get_asset_type
from dialogue.errors import ConfigurationError, MissingDataError
from dialogue.graph import DialogueGraph

# (data folder, schema file, registered asset type), in load order
CATEGORIES = (
    ("expressions", "expression.schema.json", "ActorExpression"),
    ("dialogues", "dialogue.schema.json", "Dialogue"),
    ("actors", "actor.schema.json", "ActorProfile"),
)


class DialogueDatabase:
    """
    Reads dialogue data from disk.

    Entries failing JSON schema or model validation are logged and
    skipped; the rest of the data still loads.
    """

    def __init__(self, data_path: Path | str):
        self._data_path = Path(data_path)
        self._schemas: dict[str, Any] = {}
        self.graph = DialogueGraph()

        self.logger = logging.getLogger(__name__)

    def load_all(self, strict: bool = False) -> DialogueGraph:
        """
        Load everything into a fresh graph.

        Args:
            strict: Raise MissingDataError when references dangle
                instead of only logging them

        Returns:
            The loaded graph (also kept on self.graph)
        """
        self.graph = DialogueGraph()
        self._load_schemas()

        adders = {
            "ActorExpression": self.graph.add_expression,
            "Dialogue": self.graph.add_dialogue,
            "ActorProfile": self.graph.add_actor,
        }
        for folder, schema_name, type_name in CATEGORIES:
            model = get_asset_type(type_name)
            if model is None:
                raise ConfigurationError(f"Asset type not registered: {type_name}")
            for asset in self._load_category(folder, schema_name, model):
                self._add(adders[type_name], asset)

        self.logger.info(
            f"Loaded {len(self.graph.expressions)} expressions, "
            f"{len(self.graph.dialogues)} dialogues, "
            f"{len(self.graph.actors)} actors."
        )

        problems = self.graph.find_dangling_references()
        for problem in problems:
            self.logger.error(f"Dangling reference: {problem}")
        if problems and strict:
            raise MissingDataError(problems)

        return self.graph

    def _add(self, add, asset: Asset) -> None:
        try:
            add(asset)
        except ValueError as e:
            self.logger.error(str(e))

    def _load_schemas(self) -> None:
        """Load JSON schemas, if any."""
        self._schemas.clear()
        schema_dir = self._data_path / "schemas"
        if not schema_dir.exists():
            self.logger.debug(f"Schema directory not found: {schema_dir}")
            return

        for schema_file in schema_dir.glob("*.schema.json"):
            try:
                with open(schema_file, 'r', encoding='utf-8') as f:
                    self._schemas[schema_file.name] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load schema {schema_file}: {e}")

    def _load_category(self, folder: str, schema_name: str, model: type[Asset]) -> list[Asset]:
        """Load and validate every JSON file in a category folder."""
        category_dir = self._data_path / "database" / folder
        loaded: list[Asset] = []

        if not category_dir.exists():
            self.logger.warning(f"Data directory not found: {category_dir}")
            return loaded

        schema = self._schemas.get(schema_name)

        for file_path in sorted(category_dir.glob("*.json")):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                continue

            entries = data if isinstance(data, list) else [data]
            for entry in entries:
                if schema:
                    try:
                        jsonschema.validate(instance=entry, schema=schema)
                    except jsonschema.ValidationError as e:
                        self.logger.error(f"Validation error in {file_path}: {e.message}")
                        continue
                try:
                    loaded.append(model.model_validate(entry))
                except ValidationError as e:
                    self.logger.error(f"Invalid {model.get_type_name()} in {file_path}: {e}")

        return loaded
