"""Error taxonomy for ingestion, persistence and publication."""

from __future__ import annotations


class GamedayError(RuntimeError):
    """Base class for every failure the publisher surfaces to its callers."""


class ValidationFailure(GamedayError):
    """Submitted values were rejected; ``errors`` holds one reason per problem."""

    def __init__(self, errors: list[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__(" ".join(self.errors))


class PersistenceFailure(GamedayError):
    """The game store was unreachable or a query failed; nothing was committed."""


class PublishFailure(GamedayError):
    """The snapshot could not be written; the previous snapshot is still published."""
