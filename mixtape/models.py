from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple


@dataclass(frozen=True, slots=True)
class User:
    id: str
    name: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "User":
        return cls(id=str(record["id"]), name=str(record.get("name", "")))

    def to_record(self) -> Dict[str, object]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True, slots=True)
class Song:
    id: str
    artist: str
    title: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Song":
        return cls(
            id=str(record["id"]),
            artist=str(record.get("artist", "")),
            title=str(record.get("title", "")),
        )

    def to_record(self) -> Dict[str, object]:
        return {"id": self.id, "artist": self.artist, "title": self.title}


@dataclass(frozen=True, slots=True)
class Playlist:
    """A user's ordered list of song ids. The Store replaces the record on append."""

    id: str
    user_id: str
    song_ids: Tuple[str, ...] = ()

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Playlist":
        return cls(
            id=str(record["id"]),
            user_id=str(record["user_id"]),
            song_ids=tuple(str(song_id) for song_id in record.get("song_ids") or ()),
        )

    def to_record(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "song_ids": list(self.song_ids),
        }
