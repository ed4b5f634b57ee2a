import json
import tempfile
import unittest
from pathlib import Path

from mixtape.config import SnapshotSettings, StoreSettings
from mixtape.errors import DanglingReferenceError, MalformedIdentifierError, SnapshotError
from mixtape.snapshot import dump_snapshot, load_snapshot, write_snapshot

from sample_data import SNAPSHOT, snapshot_payload, write_snapshot_file


class TestSnapshot(unittest.TestCase):
    def test_load_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_snapshot_file(Path(tmpdir) / "mixtape.json")
            store = load_snapshot(path)
        self.assertEqual(dump_snapshot(store), SNAPSHOT)
        self.assertEqual(store.next_playlist_id, 4)

    def test_missing_sections_default_to_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_snapshot_file(Path(tmpdir) / "s.json", {"users": [{"id": "1", "name": "A"}]})
            store = load_snapshot(path)
        self.assertEqual(len(store.users), 1)
        self.assertEqual(store.playlists, ())
        self.assertEqual(store.songs, ())

    def test_write_uses_two_space_indent_and_field_order(self) -> None:
        store_payload = snapshot_payload()
        with tempfile.TemporaryDirectory() as tmpdir:
            source = write_snapshot_file(Path(tmpdir) / "in.json", store_payload)
            target = Path(tmpdir) / "out.json"
            write_snapshot(load_snapshot(source), target)
            text = target.read_text(encoding="utf-8")
        self.assertTrue(text.startswith('{\n  "users": [\n    {\n      "id": "1"'))
        self.assertEqual(list(json.loads(text)), ["users", "playlists", "songs"])

    def test_custom_indent(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            source = write_snapshot_file(Path(tmpdir) / "in.json")
            target = Path(tmpdir) / "out.json"
            write_snapshot(load_snapshot(source), target, SnapshotSettings(indent=4))
            text = target.read_text(encoding="utf-8")
        self.assertTrue(text.startswith('{\n    "users"'))

    def test_round_trip_after_mutations(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            source = write_snapshot_file(Path(tmpdir) / "in.json")
            store = load_snapshot(source)
            store.remove_playlist("1")
            store.add_new_playlist("1", ["2", "2"])
            store.add_song_to_playlist("3", "1")
            target = Path(tmpdir) / "out.json"
            write_snapshot(store, target)
            reloaded = load_snapshot(target)
        self.assertEqual(dump_snapshot(reloaded), dump_snapshot(store))
        self.assertEqual(reloaded.problems(), [])
        self.assertEqual(reloaded.next_playlist_id, store.next_playlist_id)

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "absent.json"
            with self.assertRaises(SnapshotError) as ctx:
                load_snapshot(path)
        self.assertIn("absent.json", str(ctx.exception))

    def test_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "broken.json"
            path.write_text('{"users": [', encoding="utf-8")
            with self.assertRaises(SnapshotError):
                load_snapshot(path)

    def test_unexpected_structure(self) -> None:
        for payload in ([], {"users": {"id": "1"}}, {"playlists": [{"id": "1"}]}):
            with self.subTest(payload=payload):
                with tempfile.TemporaryDirectory() as tmpdir:
                    path = Path(tmpdir) / "odd.json"
                    path.write_text(json.dumps(payload), encoding="utf-8")
                    with self.assertRaises(SnapshotError):
                        load_snapshot(path)

    def test_store_errors_keep_their_type(self) -> None:
        payload = snapshot_payload()
        payload["playlists"][0]["id"] = "first"
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_snapshot_file(Path(tmpdir) / "s.json", payload)
            with self.assertRaises(MalformedIdentifierError):
                load_snapshot(path)

    def test_strict_settings_are_applied(self) -> None:
        payload = snapshot_payload()
        payload["playlists"][0]["user_id"] = "404"
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_snapshot_file(Path(tmpdir) / "s.json", payload)
            with self.assertRaises(DanglingReferenceError):
                load_snapshot(path, StoreSettings(strict_references=True))

    def test_write_to_missing_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            source = write_snapshot_file(Path(tmpdir) / "in.json")
            store = load_snapshot(source)
            with self.assertRaises(SnapshotError):
                write_snapshot(store, Path(tmpdir) / "missing" / "out.json")


if __name__ == "__main__":
    unittest.main()
