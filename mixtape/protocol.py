"""Change commands understood by the batch processor.

A raw command record is a sequence of string fields: the command name followed
by its positional arguments, e.g. ``("add-song-to-playlist", "3", "12")``.
Records are parsed into one of the command variants below and then applied to
a Store.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

from .errors import (
    ArityError,
    CommandFailedError,
    EmptyCommandError,
    StoreError,
    UnknownCommandError,
)
from .store import Store


class CommandName(str, Enum):
    ADD_PLAYLIST = "add-playlist"
    ADD_SONG_TO_PLAYLIST = "add-song-to-playlist"
    REMOVE_PLAYLIST = "rm-playlist"


@dataclass(frozen=True, slots=True)
class AddPlaylist:
    """``add-playlist,<user-id>,<song-id>[,<song-id>...]``"""

    user_id: str
    song_ids: Tuple[str, ...]

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "AddPlaylist":
        if len(args) < 2:
            raise ArityError(CommandName.ADD_PLAYLIST.value, "at least 2", len(args))
        return cls(user_id=args[0], song_ids=tuple(args[1:]))


@dataclass(frozen=True, slots=True)
class AddSongToPlaylist:
    """``add-song-to-playlist,<playlist-id>,<song-id>``"""

    playlist_id: str
    song_id: str

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "AddSongToPlaylist":
        if len(args) != 2:
            raise ArityError(CommandName.ADD_SONG_TO_PLAYLIST.value, "2", len(args))
        return cls(playlist_id=args[0], song_id=args[1])


@dataclass(frozen=True, slots=True)
class RemovePlaylist:
    """``rm-playlist,<playlist-id>``"""

    playlist_id: str

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "RemovePlaylist":
        if len(args) != 1:
            raise ArityError(CommandName.REMOVE_PLAYLIST.value, "1", len(args))
        return cls(playlist_id=args[0])


Command = Union[AddPlaylist, AddSongToPlaylist, RemovePlaylist]


def parse_command(record: Sequence[str]) -> Command:
    if not record:
        raise EmptyCommandError()
    try:
        name = CommandName(record[0])
    except ValueError:
        raise UnknownCommandError(record[0]) from None
    args = record[1:]
    match name:
        case CommandName.ADD_PLAYLIST:
            return AddPlaylist.from_args(args)
        case CommandName.ADD_SONG_TO_PLAYLIST:
            return AddSongToPlaylist.from_args(args)
        case CommandName.REMOVE_PLAYLIST:
            return RemovePlaylist.from_args(args)
        case _:
            raise UnknownCommandError(record[0])


def apply_command(command: Command, store: Store) -> Union[str, bool, None]:
    """Apply a parsed command; returns whatever the store operation returns."""
    match command:
        case AddPlaylist(user_id=user_id, song_ids=song_ids):
            return store.add_new_playlist(user_id, song_ids)
        case AddSongToPlaylist(playlist_id=playlist_id, song_id=song_id):
            store.add_song_to_playlist(playlist_id, song_id)
            return None
        case RemovePlaylist(playlist_id=playlist_id):
            return store.remove_playlist(playlist_id)
        case _:
            raise TypeError(f"Unsupported command: {command!r}")


def dispatch(record: Sequence[str], store: Store) -> Tuple[Command, Optional[Union[str, bool]]]:
    """Parse ``record`` and apply it to ``store``.

    Empty and unrecognised records raise their own errors. Argument and store
    failures are raised as CommandFailedError carrying the original record.
    """
    try:
        command = parse_command(record)
    except ArityError as exc:
        raise CommandFailedError(record, exc) from exc
    try:
        result = apply_command(command, store)
    except StoreError as exc:
        raise CommandFailedError(record, exc) from exc
    return command, result
