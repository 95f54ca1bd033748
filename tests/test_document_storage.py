# tests/test_document_storage.py
import io
import logging

import pytest

import config
from document_storage import (
    AzureBlobDocumentStore,
    LocalDocumentStore,
    discard_on_failure,
    get_document_store,
)


class FakeBlobClient:
    def __init__(self, service, container, blob):
        self.service = service
        self.container = container
        self.blob = blob
        self.url = f"https://account.blob.core.windows.net/{container}/{blob}"

    def upload_blob(self, data, overwrite=False):
        self.service.blobs[(self.container, self.blob)] = data.read()

    def delete_blob(self):
        del self.service.blobs[(self.container, self.blob)]


class FakeBlobService:
    def __init__(self):
        self.blobs = {}

    def get_blob_client(self, container, blob):
        return FakeBlobClient(self, container, blob)


def test_local_store_round_trip(tmp_path):
    store = LocalDocumentStore(str(tmp_path))

    ref = store.save(io.BytesIO(b"front"), "id-card.JPG", folder="rentals/CNT-1/id_card")

    assert ref.startswith("rentals/CNT-1/id_card/")
    assert ref.endswith(".JPG")
    assert (tmp_path / ref).read_bytes() == b"front"

    store.delete(ref)
    assert not store.exists(ref)


def test_azure_store_uses_blob_urls():
    service = FakeBlobService()
    store = AzureBlobDocumentStore("tenant-documents", service=service)

    ref = store.save(io.BytesIO(b"front"), "id-card.jpg", folder="rentals/CNT-1/document")

    assert ref.startswith("https://account.blob.core.windows.net/tenant-documents/rentals/CNT-1/document/")
    assert list(service.blobs.values()) == [b"front"]

    store.delete(ref)
    assert service.blobs == {}


def test_store_selection(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "STORAGE_BACKEND", "azure")
    assert isinstance(get_document_store(), AzureBlobDocumentStore)

    monkeypatch.setattr(config, "STORAGE_BACKEND", "local")
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path))
    store = get_document_store()
    assert isinstance(store, LocalDocumentStore)
    assert store.root == str(tmp_path)


def test_discard_on_failure_removes_saved_documents(tmp_path):
    store = LocalDocumentStore(str(tmp_path))

    with pytest.raises(ValueError, match="boom"):
        with discard_on_failure(store) as saved:
            saved.append(store.save(io.BytesIO(b"a"), "a.pdf", folder="docs"))
            saved.append(store.save(io.BytesIO(b"b"), "b.pdf", folder="docs"))
            raise ValueError("boom")

    assert len(saved) == 2
    assert not any(store.exists(ref) for ref in saved)


def test_discard_on_failure_keeps_documents_on_success(tmp_path):
    store = LocalDocumentStore(str(tmp_path))

    with discard_on_failure(store) as saved:
        saved.append(store.save(io.BytesIO(b"a"), "a.pdf", folder="docs"))

    assert store.exists(saved[0])


def test_cleanup_failure_does_not_mask_the_original_error(tmp_path, caplog):
    store = LocalDocumentStore(str(tmp_path))

    with caplog.at_level(logging.WARNING, logger="document_storage"):
        with pytest.raises(ValueError, match="original"):
            with discard_on_failure(store) as saved:
                saved.append("docs/missing.pdf")
                raise ValueError("original")

    assert "Could not remove orphaned document docs/missing.pdf" in caplog.text
