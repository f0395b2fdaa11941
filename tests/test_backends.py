"""Tests for persistence backends."""

from __future__ import annotations

from pathlib import Path

from memora.vault.backends import Backend, FileBackend, InMemoryBackend
from memora.vault.store import STORAGE_KEY, MemoryStore


class TestInMemoryBackend:
    def test_get_missing(self):
        assert InMemoryBackend().get("k") is None

    def test_set_replaces(self):
        backend = InMemoryBackend()
        backend.set("k", "one")
        backend.set("k", "two")
        assert backend.get("k") == "two"

    def test_protocol(self):
        assert isinstance(InMemoryBackend(), Backend)


class TestFileBackend:
    def test_get_missing(self, tmp_path: Path):
        assert FileBackend(tmp_path / "vault").get(STORAGE_KEY) is None

    def test_creates_dir_on_write(self, tmp_path: Path):
        root = tmp_path / "nested" / "vault"
        backend = FileBackend(root)
        backend.set("k", "[]")
        assert (root / "k.json").read_text(encoding="utf-8") == "[]"

    def test_replace_leaves_no_temp_files(self, tmp_path: Path):
        backend = FileBackend(tmp_path)
        backend.set("k", "first")
        backend.set("k", "second")
        assert backend.get("k") == "second"
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test_protocol(self, tmp_path: Path):
        assert isinstance(FileBackend(tmp_path), Backend)

    def test_store_round_trip_on_disk(self, tmp_path: Path):
        store = MemoryStore(FileBackend(tmp_path))
        store.initialize()
        store.delete("1")
        reloaded = MemoryStore(FileBackend(tmp_path)).initialize()
        assert [m.id for m in reloaded] == ["2"]

    def test_corrupt_file_falls_back(self, tmp_path: Path):
        (tmp_path / f"{STORAGE_KEY}.json").write_text("{not json", encoding="utf-8")
        memories = MemoryStore(FileBackend(tmp_path)).initialize()
        assert [m.id for m in memories] == ["1", "2"]

    def test_undecodable_file_falls_back(self, tmp_path: Path):
        (tmp_path / f"{STORAGE_KEY}.json").write_bytes(b"\xff\xfe\x00garbage")
        memories = MemoryStore(FileBackend(tmp_path)).initialize()
        assert [m.id for m in memories] == ["1", "2"]
