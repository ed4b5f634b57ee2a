"""JSON snapshot of a Store.

The document has three lists, ``users``, ``playlists`` and ``songs``. Store
indexes and the playlist id counter are derived on load and never written.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from .config import SnapshotSettings, StoreSettings
from .errors import SnapshotError
from .models import Playlist, Song, User
from .store import Store

logger = logging.getLogger(__name__)


class UserRecord(BaseModel):
    id: str
    name: str = ""


class SongRecord(BaseModel):
    id: str
    artist: str = ""
    title: str = ""


class PlaylistRecord(BaseModel):
    id: str
    user_id: str
    song_ids: List[str] = []


class SnapshotDocument(BaseModel):
    users: List[UserRecord] = []
    playlists: List[PlaylistRecord] = []
    songs: List[SongRecord] = []


def store_from_document(
    payload: Any, settings: Optional[StoreSettings] = None
) -> Store:
    document = SnapshotDocument.model_validate(payload)
    return Store(
        users=[User.from_record(r.model_dump()) for r in document.users],
        songs=[Song.from_record(r.model_dump()) for r in document.songs],
        playlists=[Playlist.from_record(r.model_dump()) for r in document.playlists],
        settings=settings,
    )


def load_snapshot(path: Path, settings: Optional[StoreSettings] = None) -> Store:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(path, exc.strerror or str(exc)) from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotError(path, f"invalid JSON ({exc})") from exc
    try:
        store = store_from_document(payload, settings)
    except ValidationError as exc:
        raise SnapshotError(path, f"unexpected structure ({exc.error_count()} error(s)): {exc}") from exc
    logger.info(
        "Loaded %d user(s), %d song(s), %d playlist(s) from %s",
        len(store.users),
        len(store.songs),
        len(store.playlists),
        path,
    )
    return store


def dump_snapshot(store: Store) -> Dict[str, List[Dict[str, object]]]:
    return {
        "users": [user.to_record() for user in store.users],
        "playlists": [playlist.to_record() for playlist in store.playlists],
        "songs": [song.to_record() for song in store.songs],
    }


def write_snapshot(
    store: Store, path: Path, settings: Optional[SnapshotSettings] = None
) -> None:
    settings = settings or SnapshotSettings()
    payload = json.dumps(dump_snapshot(store), indent=settings.indent)
    try:
        path.write_text(payload, encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(path, exc.strerror or str(exc)) from exc
    logger.info("Wrote %d playlist(s) to %s", len(store.playlists), path)
