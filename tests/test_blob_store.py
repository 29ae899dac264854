"""Tests for the directory-backed photo store."""

import pytest

from user_registry.errors import InvalidBlobName, StorageError
from user_registry.services import blob_store
from user_registry.services.blob_store import BlobStore, build_blob_name


def test_put_creates_root_and_keeps_bytes(blobs, upload_dir, png_bytes):
    assert not upload_dir.exists()

    name = blobs.put(png_bytes, "avatar.png")

    assert upload_dir.is_dir()
    assert blobs.resolve(name).read_bytes() == png_bytes
    assert blobs.exists(name)


def test_names_keep_base_and_lowercased_extension():
    name = build_blob_name("Mi Foto.JPG")
    assert name.startswith("mi-foto-")
    assert name.endswith(".jpg")


def test_same_original_name_never_collides(blobs):
    names = {blobs.put(b"x", "photo.png") for _ in range(50)}
    assert len(names) == 50


def test_directory_components_are_dropped():
    name = build_blob_name("../../etc/passwd")
    assert "/" not in name
    assert ".." not in name
    assert name.startswith("passwd-")


def test_remove_is_idempotent(blobs, png_bytes):
    name = blobs.put(png_bytes, "a.png")
    blobs.remove(name)
    assert not blobs.exists(name)
    blobs.remove(name)


@pytest.mark.parametrize(
    "bad_name",
    ["", ".", "..", "../secret.txt", "sub/file.png", "..\\secret.txt", "a\x00b.png"],
)
def test_resolve_rejects_traversal(blobs, bad_name):
    with pytest.raises(InvalidBlobName):
        blobs.resolve(bad_name)


def test_resolve_stays_under_root(tmp_path):
    store = BlobStore(tmp_path / "root")
    assert store.resolve("file.png") == (tmp_path / "root" / "file.png").resolve()


def test_name_clash_never_touches_existing_file(blobs, monkeypatch):
    monkeypatch.setattr(blob_store, "build_blob_name", lambda original: "fixed.png")
    first = blobs.put(b"first user", "a.png")

    with pytest.raises(StorageError):
        blobs.put(b"second user", "a.png")

    assert blobs.exists(first)
    assert blobs.resolve(first).read_bytes() == b"first user"


def test_name_clash_retries_with_a_new_name(blobs, monkeypatch):
    names = iter(["taken.png", "taken.png", "free.png"])
    monkeypatch.setattr(blob_store, "build_blob_name", lambda original: next(names))
    blobs.put(b"existing", "a.png")

    stored = blobs.put(b"new", "a.png")

    assert stored == "free.png"
    assert blobs.resolve("taken.png").read_bytes() == b"existing"
    assert blobs.resolve("free.png").read_bytes() == b"new"
