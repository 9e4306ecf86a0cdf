import asyncio
import io
import time

from fastapi import UploadFile
from starlette.datastructures import Headers

from app.services.storage_service import StoredObject
from app.services.upload_service import upload_document


class SlowStorage:
    """Blocking store, like a boto3 transfer of a large file."""

    def __init__(self, seconds: float):
        self.seconds = seconds
        self.uploaded = []

    def upload(self, local_path, folder=None, content_type=None, filename=None):
        time.sleep(self.seconds)
        self.uploaded.append(filename)
        key = f"{folder}/abc-{filename}"
        return StoredObject(url=f"https://files.test/{key}", storage_id=key)

    def delete(self, storage_id):
        pass


def _pdf_upload() -> UploadFile:
    return UploadFile(
        file=io.BytesIO(b"%PDF-1.4 study notes"),
        filename="notes.pdf",
        headers=Headers({"content-type": "application/pdf"}),
    )


def test_storage_upload_does_not_block_event_loop(db_session, teacher, upload_dir):
    storage = SlowStorage(seconds=0.5)
    gaps = []

    async def ticker(stop: asyncio.Event):
        last = time.perf_counter()
        while not stop.is_set():
            await asyncio.sleep(0.05)
            now = time.perf_counter()
            gaps.append(now - last)
            last = now

    async def scenario():
        stop = asyncio.Event()
        tick = asyncio.create_task(ticker(stop))
        try:
            return await upload_document(
                db_session,
                storage,
                title="Algebra Basics",
                description=None,
                subject="Math",
                upload=_pdf_upload(),
                owner=teacher,
            )
        finally:
            stop.set()
            await tick

    document = asyncio.run(scenario())

    assert document.file_type == "pdf"
    assert storage.uploaded == ["notes.pdf"]
    # The loop kept ticking while the transfer ran in a worker thread
    assert len(gaps) >= 5
    assert max(gaps) < 0.3
