from __future__ import annotations

from pathlib import Path
from typing import Sequence


class MixtapeError(Exception):
    """Base exception for mixtape errors."""


class StoreError(MixtapeError):
    """Raised when the store rejects data or a mutation."""


class MalformedIdentifierError(StoreError):
    def __init__(self, playlist_id: str) -> None:
        super().__init__(
            f"Playlist id {playlist_id!r} is not a non-negative integer"
        )
        self.playlist_id = playlist_id


class DuplicateIdentifierError(StoreError):
    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"Duplicate {kind} id {entity_id!r}")
        self.kind = kind
        self.entity_id = entity_id


class DanglingReferenceError(StoreError):
    """Raised in strict mode when a loaded playlist is inconsistent."""


class UnknownEntityError(StoreError):
    kind = "entity"

    def __init__(self, entity_id: str) -> None:
        super().__init__(f"The {self.kind} id {entity_id!r} does not exist")
        self.entity_id = entity_id


class UnknownUserError(UnknownEntityError):
    kind = "user"


class UnknownSongError(UnknownEntityError):
    kind = "song"


class UnknownPlaylistError(UnknownEntityError):
    kind = "playlist"


class EmptyPlaylistError(StoreError):
    def __init__(self) -> None:
        super().__init__("A playlist must contain at least one song")


class CommandError(MixtapeError):
    """Raised when a single change command cannot be applied."""


class EmptyCommandError(CommandError):
    def __init__(self) -> None:
        super().__init__("Can't process empty command")


class UnknownCommandError(CommandError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unrecognized command: `{name}`")
        self.name = name


class ArityError(CommandError):
    def __init__(self, name: str, expected: str, got: int) -> None:
        super().__init__(
            f"Incorrect number of arguments for `{name}` (expected {expected}, got {got})"
        )
        self.name = name
        self.expected = expected
        self.got = got


class CommandFailedError(CommandError):
    """Wraps a failure raised while applying a parsed command."""

    def __init__(self, record: Sequence[str], cause: Exception) -> None:
        super().__init__(f"Problem with `{','.join(record)}`: {cause}")
        self.record = tuple(record)
        self.cause = cause


class BatchError(MixtapeError):
    def __init__(self, failures: Sequence[object]) -> None:
        count = len(failures)
        suffix = "s" if count != 1 else ""
        super().__init__(f"{count} change{suffix} could not be applied")
        self.failures = list(failures)


class SnapshotError(MixtapeError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Problem with snapshot '{path}': {reason}")
        self.path = path


class ChangesFileError(MixtapeError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Problem reading changes file '{path}': {reason}")
        self.path = path
