# document_storage.py
"""
Storage for tenant documents uploaded with a booking request.

Files live outside the database transaction, so a failed rental creation
cannot roll them back. ``discard_on_failure`` deletes whatever was stored
during the failed attempt. This is best effort: a crash during cleanup can
still leave orphaned files behind.
"""
import logging
import os
import shutil
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import BinaryIO, Iterator, List, Optional
from urllib.parse import unquote, urlparse

from azure.storage.blob import BlobServiceClient

import config

logger = logging.getLogger(__name__)


@dataclass
class UploadedDocument:
     """A document submitted with a booking request (e.g. ID card copy, photo)."""
     filename: str
     content: BinaryIO
     kind: str = "document"


def _storage_name(filename: str) -> str:
     ext = os.path.splitext(filename or "")[1]
     return f"{uuid.uuid4()}{ext}"


class LocalDocumentStore:
     """Stores documents on the local filesystem under ``root``."""

     def __init__(self, root: str):
          self.root = root

     def save(self, fileobj: BinaryIO, filename: str, folder: str) -> str:
          ref = f"{folder}/{_storage_name(filename)}"
          file_path = os.path.join(self.root, *ref.split("/"))
          os.makedirs(os.path.dirname(file_path), exist_ok=True)
          with open(file_path, "wb") as buffer:
               shutil.copyfileobj(fileobj, buffer)
          return ref

     def delete(self, ref: str) -> None:
          os.remove(os.path.join(self.root, *ref.split("/")))

     def exists(self, ref: str) -> bool:
          return os.path.exists(os.path.join(self.root, *ref.split("/")))


class AzureBlobDocumentStore:
     """Stores documents in an Azure Blob Storage container; refs are blob URLs."""

     def __init__(self, container: str, service: Optional[BlobServiceClient] = None):
          self.container = container
          self._service = service

     @property
     def service(self) -> BlobServiceClient:
          if self._service is None:
               self._service = BlobServiceClient.from_connection_string(
                    f"DefaultEndpointsProtocol=https;"
                    f"AccountName={config.AZURE_STORAGE_ACCOUNT};"
                    f"AccountKey={config.AZURE_STORAGE_KEY};"
                    f"EndpointSuffix=core.windows.net"
               )
          return self._service

     def save(self, fileobj: BinaryIO, filename: str, folder: str) -> str:
          blob_name = f"{folder}/{_storage_name(filename)}"
          blob_client = self.service.get_blob_client(container=self.container, blob=blob_name)
          blob_client.upload_blob(fileobj, overwrite=True)
          return blob_client.url

     def delete(self, ref: str) -> None:
          """Deletes a blob using its full URL."""
          container, _, blob_name = unquote(urlparse(ref).path).lstrip("/").partition("/")
          blob_client = self.service.get_blob_client(container=container, blob=blob_name)
          blob_client.delete_blob()


def get_document_store():
     """Document store selected by ``STORAGE_BACKEND``."""
     if config.STORAGE_BACKEND == "azure":
          return AzureBlobDocumentStore(config.AZURE_STORAGE_CONTAINER)
     return LocalDocumentStore(config.UPLOAD_DIR)


@contextmanager
def discard_on_failure(store) -> Iterator[List[str]]:
     """
     Collect refs of documents stored inside the block; delete them if the block raises.

     Usage:
          with discard_on_failure(store) as saved:
               saved.append(store.save(fileobj, filename, folder))
               ...  # anything raising here removes the stored files
     """
     saved: List[str] = []
     try:
          yield saved
     except Exception:
          removed = 0
          for ref in saved:
               try:
                    store.delete(ref)
                    removed += 1
               except Exception:
                    logger.warning("Could not remove orphaned document %s", ref, exc_info=True)
          if saved:
               logger.info("Removed %d of %d document(s) after failed rental creation", removed, len(saved))
          raise
