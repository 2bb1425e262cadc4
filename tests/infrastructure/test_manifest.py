"""Tests for manifest read/write."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from gnvctl.config.models import ManifestConfig
from gnvctl.domain.errors import ManifestReadError, WriteError
from gnvctl.domain.types import Collection
from gnvctl.infrastructure.manifest import Manifest, ManifestStore
from tests.conftest import read_manifest, write_manifest


@pytest.fixture
def store() -> ManifestStore:
    return ManifestStore()


class TestRead:
    def test_missing_file_is_empty(self, store: ManifestStore, tmp_path: Path) -> None:
        manifest = store.read(tmp_path / "package.json")
        assert manifest.exists is False
        assert manifest.local == {}
        assert manifest.peer == {}

    def test_reads_both_collections(self, store: ManifestStore, tmp_path: Path) -> None:
        path = write_manifest(
            tmp_path,
            {
                "name": "tool",
                "gnvDependencies": {"foo": "1.0.0"},
                "peerDependencies": {"@org/bar": "latest"},
            },
        )
        manifest = store.read(path)
        assert manifest.exists is True
        assert manifest.local == {"foo": "1.0.0"}
        assert manifest.peer == {"@org/bar": "latest"}
        assert manifest.name == "tool"
        assert manifest.extra == {"name": "tool"}

    def test_absent_collections_are_empty(self, store: ManifestStore, tmp_path: Path) -> None:
        manifest = store.read(write_manifest(tmp_path, {"name": "tool"}))
        assert manifest.local == {}
        assert manifest.peer == {}

    def test_null_collection_is_empty(self, store: ManifestStore, tmp_path: Path) -> None:
        manifest = store.read(write_manifest(tmp_path, {"gnvDependencies": None}))
        assert manifest.local == {}

    def test_invalid_json(self, store: ManifestStore, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ManifestReadError, match="invalid JSON"):
            store.read(path)

    def test_invalid_utf8(self, store: ManifestStore, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_bytes(b'{"name": "\xff\xfe"}')
        with pytest.raises(ManifestReadError, match="not valid UTF-8"):
            store.read(path)

    def test_top_level_not_object(self, store: ManifestStore, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ManifestReadError, match="not an object"):
            store.read(path)

    def test_collection_not_object(self, store: ManifestStore, tmp_path: Path) -> None:
        path = write_manifest(tmp_path, {"peerDependencies": ["foo"]})
        with pytest.raises(ManifestReadError, match="peerDependencies"):
            store.read(path)

    def test_non_string_version(self, store: ManifestStore, tmp_path: Path) -> None:
        path = write_manifest(tmp_path, {"gnvDependencies": {"foo": 1}})
        with pytest.raises(ManifestReadError, match="gnvDependencies.foo"):
            store.read(path)

    def test_custom_keys(self, tmp_path: Path) -> None:
        store = ManifestStore(ManifestConfig(local_key="devTools", peer_key="globalTools"))
        path = write_manifest(
            tmp_path, {"devTools": {"a": "1"}, "globalTools": {"b": "2"}, "gnvDependencies": {}}
        )
        manifest = store.read(path)
        assert manifest.local == {"a": "1"}
        assert manifest.peer == {"b": "2"}
        assert "gnvDependencies" in manifest.extra


class TestManifestModel:
    def test_set_returns_previous(self) -> None:
        manifest = Manifest()
        assert manifest.set_dependency(Collection.LOCAL, "foo", "1.0.0") is None
        assert manifest.set_dependency(Collection.LOCAL, "foo", "2.0.0") == "1.0.0"
        assert manifest.local == {"foo": "2.0.0"}
        assert manifest.peer == {}

    def test_discard(self) -> None:
        manifest = Manifest(peer={"foo": "1"})
        assert manifest.discard_dependency(Collection.PEER, "foo") is True
        assert manifest.discard_dependency(Collection.PEER, "foo") is False
        assert manifest.peer == {}

    def test_name_must_be_string(self) -> None:
        assert Manifest(extra={"name": 3}).name == ""


class TestWrite:
    def test_round_trip_preserves_unknown_keys_and_order(
        self, store: ManifestStore, tmp_path: Path
    ) -> None:
        original = {
            "name": "tool",
            "peerDependencies": {"bar": "1"},
            "scripts": {"test": "jest"},
            "gnvDependencies": {"foo": "2"},
            "private": True,
        }
        path = write_manifest(tmp_path, original)
        manifest = store.read(path)
        manifest.set_dependency(Collection.LOCAL, "baz", "3")

        assert store.write(manifest, path) is True
        data = read_manifest(tmp_path)
        assert list(data) == list(original)
        assert data["scripts"] == {"test": "jest"}
        assert data["private"] is True
        assert data["gnvDependencies"] == {"foo": "2", "baz": "3"}

    def test_absent_key_added_only_when_non_empty(
        self, store: ManifestStore, tmp_path: Path
    ) -> None:
        path = write_manifest(tmp_path, {"name": "tool"})
        manifest = store.read(path)
        manifest.set_dependency(Collection.PEER, "foo", "latest")
        store.write(manifest, path)

        data = read_manifest(tmp_path)
        assert list(data) == ["name", "peerDependencies"]
        assert "gnvDependencies" not in data

    def test_existing_empty_key_kept(self, store: ManifestStore, tmp_path: Path) -> None:
        path = write_manifest(tmp_path, {"gnvDependencies": {"foo": "1"}})
        manifest = store.read(path)
        manifest.discard_dependency(Collection.LOCAL, "foo")
        store.write(manifest, path)
        assert read_manifest(tmp_path) == {"gnvDependencies": {}}

    def test_indent_and_trailing_newline(self, store: ManifestStore, tmp_path: Path) -> None:
        path = write_manifest(tmp_path, {"name": "tool"})
        store.write(store.read(path), path, indent=4)
        text = path.read_text(encoding="utf-8")
        assert text == json.dumps({"name": "tool"}, indent=4) + "\n"

    def test_non_ascii_kept(self, store: ManifestStore, tmp_path: Path) -> None:
        path = write_manifest(tmp_path, {"description": "café"})
        store.write(store.read(path), path)
        assert "café" in path.read_text(encoding="utf-8")

    def test_never_creates_manifest(self, store: ManifestStore, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        manifest = Manifest(local={"foo": "1"})
        assert store.write(manifest, path) is False
        assert not path.exists()

    def test_unwritable_raises(self, store: ManifestStore, tmp_path: Path) -> None:
        # A directory at the manifest path exists but cannot be written as a file.
        path = tmp_path / "package.json"
        path.mkdir()
        with pytest.raises(WriteError):
            store.write(Manifest(), path)


class TestNullCollections:
    def test_null_kept_when_unchanged(self, store: ManifestStore, tmp_path: Path) -> None:
        path = write_manifest(tmp_path, {"name": "tool", "peerDependencies": None})
        manifest = store.read(path)
        manifest.set_dependency(Collection.LOCAL, "foo", "1")
        store.write(manifest, path)

        data = read_manifest(tmp_path)
        assert data["peerDependencies"] is None
        assert data["gnvDependencies"] == {"foo": "1"}

    def test_null_replaced_once_changed(self, store: ManifestStore, tmp_path: Path) -> None:
        path = write_manifest(tmp_path, {"peerDependencies": None})
        manifest = store.read(path)
        manifest.set_dependency(Collection.PEER, "bar", "2")
        store.write(manifest, path)
        assert read_manifest(tmp_path) == {"peerDependencies": {"bar": "2"}}


class TestAtomicWrite:
    def test_failed_replace_leaves_original(self, store: ManifestStore, tmp_path: Path) -> None:
        path = write_manifest(tmp_path, {"name": "tool", "gnvDependencies": {"foo": "1"}})
        before = path.read_text(encoding="utf-8")
        manifest = store.read(path)
        manifest.set_dependency(Collection.LOCAL, "bar", "2")

        with (
            patch("gnvctl.infrastructure.manifest.os.replace", side_effect=OSError(28, "No space")),
            pytest.raises(WriteError, match="No space"),
        ):
            store.write(manifest, path)

        assert path.read_text(encoding="utf-8") == before
        assert sorted(p.name for p in tmp_path.iterdir()) == ["package.json"]

    def test_keeps_file_mode(self, store: ManifestStore, tmp_path: Path) -> None:
        path = write_manifest(tmp_path, {"name": "tool"})
        path.chmod(0o640)
        store.write(store.read(path), path)
        assert path.stat().st_mode & 0o777 == 0o640
