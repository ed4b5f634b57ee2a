from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .config import StoreSettings
from .errors import (
    DanglingReferenceError,
    DuplicateIdentifierError,
    EmptyPlaylistError,
    MalformedIdentifierError,
    UnknownPlaylistError,
    UnknownSongError,
    UnknownUserError,
)
from .models import Playlist, Song, User

logger = logging.getLogger(__name__)

_PLAYLIST_ID = re.compile(r"[0-9]+")


def parse_playlist_id(playlist_id: str) -> int:
    if not _PLAYLIST_ID.fullmatch(playlist_id):
        raise MalformedIdentifierError(playlist_id)
    return int(playlist_id)


def _build_index(kind: str, ids: Iterable[str], *, unique: bool) -> Dict[str, int]:
    index: Dict[str, int] = {}
    for position, entity_id in enumerate(ids):
        previous = index.get(entity_id)
        if previous is not None:
            if unique:
                raise DuplicateIdentifierError(kind, entity_id)
            logger.warning(
                "Duplicate %s id %r at position %d shadows position %d",
                kind,
                entity_id,
                position,
                previous,
            )
        index[entity_id] = position
    return index


def _index_problems(
    kind: str, ids: Sequence[str], index: Dict[str, int]
) -> List[str]:
    problems: List[str] = []
    for position, entity_id in enumerate(ids):
        indexed = index.get(entity_id)
        if indexed is None:
            problems.append(f"{kind} {entity_id!r} at position {position} is not indexed")
    for entity_id, position in index.items():
        if position >= len(ids) or ids[position] != entity_id:
            problems.append(f"{kind} index entry {entity_id!r} -> {position} is stale")
    return problems


def _duplicates(kind: str, ids: Sequence[str]) -> List[str]:
    positions: Dict[str, List[int]] = {}
    for position, entity_id in enumerate(ids):
        positions.setdefault(entity_id, []).append(position)
    return [
        f"{kind} id {entity_id!r} appears at positions {found}"
        for entity_id, found in positions.items()
        if len(found) > 1
    ]


class Store:
    """In-memory catalog of users, songs and playlists.

    Each collection is a dense list paired with an ``id -> position`` index so
    lookups and playlist removal are O(1). Removal moves the last playlist into
    the vacated slot, so playlist order is not preserved; the order of songs
    inside a playlist always is.

    A Store has exactly one writer. Nothing here is guarded against concurrent
    mutation.
    """

    def __init__(
        self,
        users: Iterable[User] = (),
        songs: Iterable[Song] = (),
        playlists: Iterable[Playlist] = (),
        *,
        settings: Optional[StoreSettings] = None,
    ) -> None:
        self.settings = settings or StoreSettings()
        unique = self.settings.unique_ids
        self._users: List[User] = list(users)
        self._songs: List[Song] = list(songs)
        self._playlists: List[Playlist] = [
            Playlist(id=p.id, user_id=p.user_id, song_ids=tuple(p.song_ids))
            for p in playlists
        ]
        self._user_index = _build_index(
            "user", (user.id for user in self._users), unique=unique
        )
        self._song_index = _build_index(
            "song", (song.id for song in self._songs), unique=unique
        )
        self._playlist_index = _build_index(
            "playlist", (playlist.id for playlist in self._playlists), unique=unique
        )
        max_playlist_id = 0
        for playlist in self._playlists:
            max_playlist_id = max(max_playlist_id, parse_playlist_id(playlist.id))
        self._next_playlist_id = max_playlist_id + 1

        dangling = self.reference_problems()
        if dangling:
            if self.settings.strict_references:
                raise DanglingReferenceError("; ".join(dangling))
            for problem in dangling:
                logger.warning("Inconsistent snapshot: %s", problem)

    @property
    def users(self) -> Tuple[User, ...]:
        return tuple(self._users)

    @property
    def songs(self) -> Tuple[Song, ...]:
        return tuple(self._songs)

    @property
    def playlists(self) -> Tuple[Playlist, ...]:
        return tuple(self._playlists)

    @property
    def next_playlist_id(self) -> int:
        return self._next_playlist_id

    def user_position(self, user_id: str) -> Optional[int]:
        return self._user_index.get(user_id)

    def song_position(self, song_id: str) -> Optional[int]:
        return self._song_index.get(song_id)

    def playlist_position(self, playlist_id: str) -> Optional[int]:
        return self._playlist_index.get(playlist_id)

    def find_user(self, user_id: str) -> Optional[User]:
        position = self._user_index.get(user_id)
        return None if position is None else self._users[position]

    def find_song(self, song_id: str) -> Optional[Song]:
        position = self._song_index.get(song_id)
        return None if position is None else self._songs[position]

    def find_playlist(self, playlist_id: str) -> Optional[Playlist]:
        position = self._playlist_index.get(playlist_id)
        return None if position is None else self._playlists[position]

    def remove_playlist(self, playlist_id: str) -> bool:
        """Remove a playlist; returns False when the id is not present.

        Removing the same id twice is allowed and the second call is a no-op.
        """
        position = self._playlist_index.get(playlist_id)
        if position is None:
            return False
        last = self._playlists.pop()
        del self._playlist_index[playlist_id]
        if position < len(self._playlists):
            self._playlists[position] = last
            self._playlist_index[last.id] = position
        logger.debug("Removed playlist %s", playlist_id)
        return True

    def add_new_playlist(self, user_id: str, song_ids: Iterable[str]) -> str:
        """Create a playlist for ``user_id`` and return its new id.

        Raises UnknownUserError, EmptyPlaylistError or UnknownSongError (checked
        in that order) without modifying the store.
        """
        song_ids = list(song_ids)
        if user_id not in self._user_index:
            raise UnknownUserError(user_id)
        if not song_ids:
            raise EmptyPlaylistError()
        for song_id in song_ids:
            if song_id not in self._song_index:
                raise UnknownSongError(song_id)

        playlist = Playlist(
            id=self._generate_playlist_id(), user_id=user_id, song_ids=tuple(song_ids)
        )
        self._playlists.append(playlist)
        self._playlist_index[playlist.id] = len(self._playlists) - 1
        logger.debug(
            "Added playlist %s for user %s with %d song(s)",
            playlist.id,
            user_id,
            len(song_ids),
        )
        return playlist.id

    def add_song_to_playlist(self, playlist_id: str, song_id: str) -> None:
        # Song is checked before playlist so the reported error is stable
        # when both ids are unknown.
        if song_id not in self._song_index:
            raise UnknownSongError(song_id)
        position = self._playlist_index.get(playlist_id)
        if position is None:
            raise UnknownPlaylistError(playlist_id)
        playlist = self._playlists[position]
        self._playlists[position] = replace(
            playlist, song_ids=playlist.song_ids + (song_id,)
        )
        logger.debug("Added song %s to playlist %s", song_id, playlist_id)

    def _generate_playlist_id(self) -> str:
        playlist_id = self._next_playlist_id
        self._next_playlist_id += 1
        return str(playlist_id)

    def index_problems(self) -> List[str]:
        return (
            _index_problems("user", [u.id for u in self._users], self._user_index)
            + _index_problems("song", [s.id for s in self._songs], self._song_index)
            + _index_problems(
                "playlist", [p.id for p in self._playlists], self._playlist_index
            )
        )

    def duplicate_ids(self) -> List[str]:
        return (
            _duplicates("user", [u.id for u in self._users])
            + _duplicates("song", [s.id for s in self._songs])
            + _duplicates("playlist", [p.id for p in self._playlists])
        )

    def reference_problems(self) -> List[str]:
        problems: List[str] = []
        for playlist in self._playlists:
            if playlist.user_id not in self._user_index:
                problems.append(
                    f"playlist {playlist.id!r} refers to unknown user {playlist.user_id!r}"
                )
            if not playlist.song_ids:
                problems.append(f"playlist {playlist.id!r} has no songs")
            for song_id in playlist.song_ids:
                if song_id not in self._song_index:
                    problems.append(
                        f"playlist {playlist.id!r} refers to unknown song {song_id!r}"
                    )
        return problems

    def counter_problems(self) -> List[str]:
        return [
            f"playlist id {playlist.id!r} is not below next id {self._next_playlist_id}"
            for playlist in self._playlists
            if parse_playlist_id(playlist.id) >= self._next_playlist_id
        ]

    def problems(self) -> List[str]:
        """Return every integrity violation found; empty when the store is consistent."""
        return (
            self.index_problems()
            + self.duplicate_ids()
            + self.reference_problems()
            + self.counter_problems()
        )
