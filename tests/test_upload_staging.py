import asyncio
import io
import os
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.core.exceptions import PayloadTooLargeError
from app.services.upload_staging import remove_staged_file, stage_upload, staged_upload


def _upload(content: bytes, filename="notes.pdf", content_type="application/pdf") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def test_stage_writes_file(upload_dir):
    staged = asyncio.run(stage_upload(_upload(b"%PDF-1.4 hello")))
    try:
        assert staged.path.read_bytes() == b"%PDF-1.4 hello"
        assert staged.path.name.endswith("-notes.pdf")
        assert str(staged.path).startswith(upload_dir)
        assert staged.original_filename == "notes.pdf"
        assert staged.content_type == "application/pdf"
        assert staged.size == 14
    finally:
        remove_staged_file(staged.path)


def test_stage_strips_directories_from_filename(upload_dir):
    staged = asyncio.run(stage_upload(_upload(b"x", filename="../../etc/passwd.pdf")))
    try:
        assert staged.path.parent == Path(upload_dir)
        assert staged.path.name.endswith("-passwd.pdf")
    finally:
        remove_staged_file(staged.path)


def test_oversized_upload_rejected_and_removed(upload_dir):
    before = set(os.listdir(upload_dir))
    with pytest.raises(PayloadTooLargeError) as exc_info:
        asyncio.run(stage_upload(_upload(b"x" * 2048), max_bytes=1024))
    assert exc_info.value.status_code == 413
    assert set(os.listdir(upload_dir)) == before


def test_context_manager_cleans_up_on_error(upload_dir):
    seen = {}

    async def scenario():
        async with staged_upload(_upload(b"data")) as staged:
            seen["path"] = staged.path
            assert staged.path.exists()
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())
    assert not seen["path"].exists()


def test_context_manager_tolerates_early_removal(upload_dir):
    async def scenario():
        async with staged_upload(_upload(b"data")) as staged:
            remove_staged_file(staged.path)
            return staged.path

    path = asyncio.run(scenario())
    assert not path.exists()


def test_remove_missing_file(tmp_path):
    assert remove_staged_file(tmp_path / "missing") is False
