from unittest.mock import MagicMock

import pytest
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError, EndpointConnectionError

from app.services.storage_service import S3Storage, StorageUploadError, object_key


@pytest.fixture()
def staged_file(tmp_path):
    path = tmp_path / "1700000000000-42-notes.pdf"
    path.write_bytes(b"%PDF-1.4")
    return path


def _client_error(code="AccessDenied"):
    return ClientError({"Error": {"Code": code, "Message": "denied"}}, "PutObject")


class TestObjectKey:
    def test_key_under_folder(self):
        key = object_key("studygeni", "notes.pdf")
        assert key.startswith("studygeni/")
        assert key.endswith("-notes.pdf")

    def test_keys_unique(self):
        assert object_key("studygeni", "a.pdf") != object_key("studygeni", "a.pdf")

    def test_unsafe_characters_replaced(self):
        key = object_key("/studygeni/", "../My Notes (final).pdf")
        assert key.startswith("studygeni/")
        assert " " not in key and "(" not in key and ".." not in key.split("/", 1)[1]


class TestUpload:
    def test_success_returns_reference_and_removes_file(self, staged_file):
        client = MagicMock()

        def _assert_file_present(path, bucket, key, ExtraArgs=None):
            assert staged_file.exists()

        client.upload_file.side_effect = _assert_file_present
        store = S3Storage(bucket="bucket", client=client, public_base_url="https://cdn.example.com/")

        stored = store.upload(staged_file, folder="studygeni", content_type="application/pdf", filename="notes.pdf")

        assert stored.storage_id.startswith("studygeni/")
        assert stored.storage_id.endswith("-notes.pdf")
        assert stored.url == f"https://cdn.example.com/{stored.storage_id}"
        client.upload_file.assert_called_once_with(
            str(staged_file), "bucket", stored.storage_id,
            ExtraArgs={"ContentType": "application/pdf"},
        )
        assert not staged_file.exists()

    def test_default_url_is_s3_virtual_host(self, staged_file):
        store = S3Storage(bucket="bucket", client=MagicMock(), region="eu-west-1")
        stored = store.upload(staged_file)
        assert stored.url.startswith("https://bucket.s3.eu-west-1.amazonaws.com/studygeni/")

    def test_remote_rejection_removes_file(self, staged_file):
        client = MagicMock()
        client.upload_file.side_effect = _client_error()
        store = S3Storage(bucket="bucket", client=client)

        with pytest.raises(StorageUploadError):
            store.upload(staged_file, filename="notes.pdf")
        assert not staged_file.exists()

    def test_transfer_failure_removes_file(self, staged_file):
        # S3Transfer wraps the PutObject ClientError in S3UploadFailedError
        client = MagicMock()
        client.upload_file.side_effect = S3UploadFailedError(
            "Failed to upload notes.pdf to bucket/key: An error occurred (AccessDenied) "
            "when calling the PutObject operation: Access Denied"
        )
        store = S3Storage(bucket="bucket", client=client)

        with pytest.raises(StorageUploadError, match="AccessDenied"):
            store.upload(staged_file, filename="notes.pdf")
        assert not staged_file.exists()

    def test_network_error_removes_file(self, staged_file):
        client = MagicMock()
        client.upload_file.side_effect = EndpointConnectionError(endpoint_url="https://s3.example.com")
        store = S3Storage(bucket="bucket", client=client)

        with pytest.raises(StorageUploadError):
            store.upload(staged_file)
        assert not staged_file.exists()

    def test_unexpected_error_still_removes_file(self, staged_file):
        client = MagicMock()
        client.upload_file.side_effect = RuntimeError("disk gone")
        store = S3Storage(bucket="bucket", client=client)

        with pytest.raises(RuntimeError):
            store.upload(staged_file)
        assert not staged_file.exists()

    def test_missing_bucket_configuration(self, staged_file, monkeypatch):
        from app.core.config import settings
        monkeypatch.setattr(settings, "s3_bucket", "")
        store = S3Storage(bucket="")

        with pytest.raises(StorageUploadError, match="S3_BUCKET"):
            store.upload(staged_file)
        assert not staged_file.exists()


class TestDelete:
    def test_delete(self):
        client = MagicMock()
        S3Storage(bucket="bucket", client=client).delete("studygeni/abc-notes.pdf")
        client.delete_object.assert_called_once_with(Bucket="bucket", Key="studygeni/abc-notes.pdf")

    def test_delete_failure(self):
        client = MagicMock()
        client.delete_object.side_effect = _client_error("InternalError")
        with pytest.raises(StorageUploadError):
            S3Storage(bucket="bucket", client=client).delete("studygeni/abc-notes.pdf")
