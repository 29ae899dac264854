"""Tests for upload validation (MIME type, size, field rules)."""

import asyncio
from io import BytesIO

import pytest
from starlette.datastructures import FormData, Headers, UploadFile

from user_registry.errors import UploadRejected, ValidationError
from user_registry.services.upload_intake import extract_upload, read_validated

ALLOWED = ["image/jpeg", "image/png"]


def make_upload(data: bytes, filename: str = "a.png", content_type: str = "image/png") -> UploadFile:
    return UploadFile(
        file=BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def test_extract_single_file():
    upload = make_upload(b"abc")
    form = FormData([("name", "Ann"), ("photo", upload)])
    assert extract_upload(form, "photo") is upload


def test_extract_without_file_returns_none():
    form = FormData([("name", "Ann"), ("email", "ann@example.com")])
    assert extract_upload(form, "photo") is None


def test_empty_file_input_is_no_file():
    form = FormData([("photo", make_upload(b"", filename=""))])
    assert extract_upload(form, "photo") is None


def test_two_files_in_field_are_rejected():
    form = FormData([("photo", make_upload(b"a")), ("photo", make_upload(b"b"))])
    with pytest.raises(ValidationError):
        extract_upload(form, "photo")


def test_file_in_unexpected_field_is_rejected():
    form = FormData([("avatar", make_upload(b"a"))])
    with pytest.raises(ValidationError, match="avatar"):
        extract_upload(form, "photo")


def test_valid_file_is_read():
    incoming = asyncio.run(read_validated(make_upload(b"12345"), ALLOWED, max_size=10))
    assert incoming.data == b"12345"
    assert incoming.filename == "a.png"
    assert incoming.content_type == "image/png"
    assert incoming.size == 5


def test_file_at_exact_limit_is_accepted():
    incoming = asyncio.run(read_validated(make_upload(b"x" * 10), ALLOWED, max_size=10))
    assert incoming.size == 10


def test_oversized_file_is_rejected():
    with pytest.raises(UploadRejected, match="maximum size"):
        asyncio.run(read_validated(make_upload(b"x" * 11), ALLOWED, max_size=10))


def test_disallowed_type_is_rejected():
    upload = make_upload(b"%PDF", filename="doc.pdf", content_type="application/pdf")
    with pytest.raises(UploadRejected, match="application/pdf"):
        asyncio.run(read_validated(upload, ALLOWED, max_size=10))


def test_upload_rejected_is_a_client_error():
    assert issubclass(UploadRejected, ValidationError)
    assert UploadRejected.status_code == 400
