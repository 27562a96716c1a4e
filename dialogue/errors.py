"""
Dialogue error types.

Only setup-time problems are raised. Runtime misuse (continuing with no
active dialogue, starting a second one, unknown ids) is logged and
ignored by the manager instead.
"""


class DialogueError(Exception):
    """Base class for dialogue errors."""


class ConfigurationError(DialogueError):
    """A required collaborator is missing or misconfigured."""


class MissingDataError(DialogueError):
    """Authored data references something that does not exist."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "missing dialogue data")
