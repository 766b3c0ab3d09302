from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore

from clientpl.adapters.google.credentials import ServiceAccountConfig
from clientpl.adapters.google.retrying import google_retrying
from clientpl.core.summaries.models import StoredDocument
from clientpl.core.summaries.ports import DocumentStorePort

logger = logging.getLogger(__name__)

_init_lock = threading.Lock()


def init_firebase_app(config: ServiceAccountConfig) -> None:
    """Initialise the default Firebase Admin app exactly once."""
    if firebase_admin._apps:
        return
    with _init_lock:
        if firebase_admin._apps:
            return
        options = {"projectId": config.project_id} if config.project_id else None
        firebase_admin.initialize_app(credentials.Certificate(config.info), options)
        logger.info("Initialised Firebase Admin project=%s", config.project_id)


class FirestoreDocumentStore(DocumentStorePort):
    def __init__(
        self,
        client: Optional[Any] = None,
        *,
        config: Optional[ServiceAccountConfig] = None,
        retry_attempts: Optional[int] = None,
        retry_wait: Optional[float] = None,
        retry_deadline: Optional[float] = None,
    ) -> None:
        if client is None and config is None:
            raise ValueError("FirestoreDocumentStore needs a client or a ServiceAccountConfig")
        self._client = client
        self._config = config
        self._retry_attempts = retry_attempts if retry_attempts is not None else (
            config.retry_attempts if config else 3
        )
        self._retry_wait = retry_wait if retry_wait is not None else (
            config.retry_wait if config else 0.5
        )
        self._retry_deadline = retry_deadline

    @property
    def client(self) -> Any:
        if self._client is None:
            init_firebase_app(self._config)
            self._client = firestore.client()
        return self._client

    async def list_collection(self, path: str) -> list[StoredDocument]:
        return await asyncio.to_thread(self._list_collection_with_retry, path)

    def _list_collection_with_retry(self, path: str) -> list[StoredDocument]:
        retrying = google_retrying(self._retry_attempts, self._retry_wait, self._retry_deadline)
        return retrying(self._list_collection, path)

    def _list_collection(self, path: str) -> list[StoredDocument]:
        documents = [
            StoredDocument(id=snapshot.id, fields=snapshot.to_dict() or {})
            for snapshot in self.client.collection(path).stream()
        ]
        logger.debug("Listed collection=%s documents=%s", path, len(documents))
        return documents
