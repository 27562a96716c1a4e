"""
Authored dialogue data and the graph that links it.

Actors, dialogues and expressions are frozen pydantic assets. They refer
to each other by id only; DialogueGraph is the arena that owns them and
resolves those ids. Cycles (a dialogue whose next dialogue leads back to
it) are therefore harmless.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from engine.core.component import Asset, register_asset
from dialogue.errors import MissingDataError


@register_asset
class Effect(Asset):
    """
    A timed audio and/or visual cue attached to a line.

    Attributes:
        sound_effect: Audio clip played when the effect fires
        visual_effect: Visual payload id handed to the renderer
        duration: How long the visual should persist (advisory; negative
            means until the player continues)
        delay: Seconds after the line starts before the effect fires
    """
    sound_effect: Optional[str] = None
    visual_effect: Optional[str] = None
    duration: float = -1.0
    delay: float = 0.0


@register_asset
class Line(Asset):
    """
    One displayable beat of dialogue.

    Attributes:
        text: Display text (rendered externally)
        audio_clip: Voice clip played when the line starts
        expression: ActorExpression id; None keeps the previous expression
        effects: Effects scheduled from the start of the line
        display_duration: Seconds before auto-advancing; negative waits
            for an explicit continue
    """
    text: str = ""
    audio_clip: Optional[str] = None
    expression: Optional[str] = None
    effects: tuple[Effect, ...] = ()
    display_duration: float = -1.0

    @property
    def auto_advances(self) -> bool:
        return self.display_duration >= 0


@register_asset
class Choice(Asset):
    """
    A player-selectable branch offered at the end of a dialogue.

    When next_dialogue is None the containing dialogue's next_dialogue is
    used instead; this lets several choices converge with different side
    effects.
    """
    text: str = ""
    next_dialogue: Optional[str] = None


@register_asset
class Dialogue(Asset):
    """
    An ordered sequence of lines plus optional choices or next link.

    If choices is non-empty, next_dialogue is ignored when the last line
    has played: choices always win.
    """
    id: str
    lines: tuple[Line, ...] = ()
    choices: tuple[Choice, ...] = ()
    next_dialogue: Optional[str] = None
    start_conditions: tuple[str, ...] = ()

    @field_validator("id")
    @classmethod
    def _id_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("dialogue id must not be empty")
        return value

    @property
    def has_choices(self) -> bool:
        return len(self.choices) > 0


@register_asset
class ActorExpression(Asset):
    """
    A sprite/animation an actor shows while a line is displayed.

    Consumed by the renderer; the engine only carries the reference.
    """
    id: str
    actor_id: str = ""
    sprite: Optional[str] = None
    animation: Optional[str] = None
    expression_duration: float = 0.0
    transition_duration: float = 0.0


@register_asset
class ActorProfile(Asset):
    """
    Authored data for an interactable character.

    Attributes:
        id: Unique actor profile id
        name: Display name
        description: Free text for the game's own use
        portrait: Portrait asset id
        dialogues: Ids of dialogues this actor can play, in order. The
            first one is the default dialogue.
        interaction_conditions: Condition names checked in order before
            the actor can be interacted with
        use_interaction_cache: Remember conditions once they pass
    """
    id: str
    name: str = ""
    description: str = ""
    portrait: Optional[str] = None
    dialogues: tuple[str, ...] = ()
    interaction_conditions: tuple[str, ...] = ()
    use_interaction_cache: bool = True


class DialogueGraph:
    """
    Arena of authored dialogue data keyed by id.

    Usage:
        graph = DialogueGraph()
        graph.add_dialogue(Dialogue(id="intro", lines=[Line(text="Hi")]))
        graph.add_actor(ActorProfile(id="guide", dialogues=["intro"]))
        graph.validate()
    """

    def __init__(
        self,
        dialogues: Optional[list[Dialogue]] = None,
        actors: Optional[list[ActorProfile]] = None,
        expressions: Optional[list[ActorExpression]] = None,
    ):
        self.dialogues: dict[str, Dialogue] = {}
        self.actors: dict[str, ActorProfile] = {}
        self.expressions: dict[str, ActorExpression] = {}

        for dialogue in dialogues or []:
            self.add_dialogue(dialogue)
        for actor in actors or []:
            self.add_actor(actor)
        for expression in expressions or []:
            self.add_expression(expression)

    # Registration

    def add_dialogue(self, dialogue: Dialogue) -> Dialogue:
        if dialogue.id in self.dialogues:
            raise ValueError(f"Duplicate dialogue id: {dialogue.id}")
        self.dialogues[dialogue.id] = dialogue
        return dialogue

    def add_actor(self, actor: ActorProfile) -> ActorProfile:
        if actor.id in self.actors:
            raise ValueError(f"Duplicate actor id: {actor.id}")
        self.actors[actor.id] = actor
        return actor

    def add_expression(self, expression: ActorExpression) -> ActorExpression:
        if expression.id in self.expressions:
            raise ValueError(f"Duplicate expression id: {expression.id}")
        self.expressions[expression.id] = expression
        return expression

    # Lookup

    def get_dialogue(self, dialogue_id: Optional[str]) -> Optional[Dialogue]:
        if dialogue_id is None:
            return None
        return self.dialogues.get(dialogue_id)

    def get_actor(self, actor_id: str) -> Optional[ActorProfile]:
        return self.actors.get(actor_id)

    def get_expression(self, expression_id: Optional[str]) -> Optional[ActorExpression]:
        if expression_id is None:
            return None
        return self.expressions.get(expression_id)

    def resolve_next(self, dialogue: Dialogue) -> Optional[Dialogue]:
        """The dialogue linked after this one, if any."""
        return self.get_dialogue(dialogue.next_dialogue)

    def resolve_choice(self, choice: Choice) -> Optional[Dialogue]:
        """The dialogue a choice leads to on its own (no fallback)."""
        return self.get_dialogue(choice.next_dialogue)

    # Actor profile queries

    def dialogues_of(self, profile: ActorProfile) -> list[Dialogue]:
        """Resolved dialogues of a profile, in order, skipping unknown ids."""
        return [d for d in (self.get_dialogue(i) for i in profile.dialogues) if d]

    def get_actor_dialogue(self, profile: ActorProfile, dialogue_id: str) -> Optional[Dialogue]:
        """Find a dialogue among the ones the actor owns."""
        if dialogue_id not in profile.dialogues:
            return None
        return self.get_dialogue(dialogue_id)

    def first_dialogue(self, profile: ActorProfile) -> Optional[Dialogue]:
        owned = self.dialogues_of(profile)
        return owned[0] if owned else None

    def last_dialogue(self, profile: ActorProfile) -> Optional[Dialogue]:
        owned = self.dialogues_of(profile)
        return owned[-1] if owned else None

    def next_dialogue_of(self, profile: ActorProfile, dialogue: Dialogue) -> Optional[Dialogue]:
        """The dialogue after `dialogue` in the actor's list, if any."""
        owned = self.dialogues_of(profile)
        ids = [d.id for d in owned]
        if dialogue.id not in ids:
            return None
        index = ids.index(dialogue.id)
        if index + 1 >= len(owned):
            return None
        return owned[index + 1]

    def default_dialogue(self, profile: ActorProfile) -> Optional[Dialogue]:
        """The default dialogue is the first one in the profile."""
        return self.first_dialogue(profile)

    # Validation

    def find_dangling_references(self) -> list[str]:
        """Describe every id reference that does not resolve."""
        problems = []

        for dialogue in self.dialogues.values():
            if dialogue.next_dialogue and dialogue.next_dialogue not in self.dialogues:
                problems.append(
                    f"dialogue '{dialogue.id}' links to unknown dialogue '{dialogue.next_dialogue}'"
                )
            for i, choice in enumerate(dialogue.choices):
                if choice.next_dialogue and choice.next_dialogue not in self.dialogues:
                    problems.append(
                        f"choice {i} of dialogue '{dialogue.id}' links to unknown "
                        f"dialogue '{choice.next_dialogue}'"
                    )
            for i, line in enumerate(dialogue.lines):
                if line.expression and line.expression not in self.expressions:
                    problems.append(
                        f"line {i} of dialogue '{dialogue.id}' uses unknown "
                        f"expression '{line.expression}'"
                    )

        for actor in self.actors.values():
            for dialogue_id in actor.dialogues:
                if dialogue_id not in self.dialogues:
                    problems.append(f"actor '{actor.id}' owns unknown dialogue '{dialogue_id}'")

        return problems

    def validate(self) -> None:
        """Raise MissingDataError if any reference dangles."""
        problems = self.find_dangling_references()
        if problems:
            raise MissingDataError(problems)

    def __len__(self) -> int:
        return len(self.dialogues)

    def __contains__(self, dialogue_id: str) -> bool:
        return dialogue_id in self.dialogues
