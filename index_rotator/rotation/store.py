"""
Elasticsearch adapter used by IndexRotator

Exposes only the index and document operations rotation needs, and maps
transient transport failures onto TransientStoreError so callers can
decide what to retry. Any object with the same methods can stand in for
it (tests use an in-memory store).

Document calls take an optional `doc_type` for engines that still have
mapping types (< 7.0). The 8.x client only speaks to typeless clusters,
so this adapter accepts the type and does not send it.
"""

from contextlib import contextmanager
from typing import Optional

from elasticsearch import (
    ApiError,
    ConnectionError as ESConnectionError,
    ConnectionTimeout,
    Elasticsearch,
    NotFoundError,
)

from ..exceptions import DocumentNotFound, TransientStoreError


def is_transient_error(error: Exception) -> bool:
    """Connection problems and 5xx responses are worth retrying"""
    if isinstance(error, (ESConnectionError, ConnectionTimeout)):
        return True
    if isinstance(error, ApiError):
        return error.meta.status >= 500
    return False


@contextmanager
def translate_errors():
    """Re-raise transient engine failures as TransientStoreError"""
    try:
        yield
    except (ApiError, ESConnectionError, ConnectionTimeout) as e:
        if is_transient_error(e):
            raise TransientStoreError(str(e)) from e
        raise


def _body(response):
    """Unwrap an ApiResponse into a plain dict"""
    return getattr(response, "body", response)


class ElasticsearchStore:
    """Index lifecycle and document access on an Elasticsearch cluster"""

    def __init__(self, es_client: Elasticsearch, refresh: bool = True):
        self.es = es_client
        self.refresh = refresh

    def index_exists(self, name: str) -> bool:
        with translate_errors():
            return bool(self.es.indices.exists(index=name))

    def create_index(self, name: str, body: dict) -> dict:
        with translate_errors():
            return _body(self.es.indices.create(index=name, body=body))

    def delete_index(self, name: str) -> dict:
        with translate_errors():
            return _body(self.es.indices.delete(index=name))

    def get_document(self, index: str, doc_id: str, doc_type: Optional[str] = None) -> dict:
        """
        Fetch a document by id

        Raises:
            DocumentNotFound: If the document (or its index) does not exist
        """
        with translate_errors():
            try:
                return _body(self.es.get(index=index, id=doc_id))
            except NotFoundError as e:
                raise DocumentNotFound(index, doc_id) from e

    def put_document(
        self,
        index: str,
        body: dict,
        doc_id: Optional[str] = None,
        doc_type: Optional[str] = None
    ) -> str:
        """Index a document, auto-generating the id when none is given"""
        params = {
            "index": index,
            "body": body,
        }
        if doc_id is not None:
            params["id"] = doc_id
        if self.refresh:
            params["refresh"] = True

        with translate_errors():
            response = self.es.index(**params)
        return response["_id"]

    def delete_document(self, index: str, doc_id: str, doc_type: Optional[str] = None) -> bool:
        """Delete a document; returns False if it was already gone"""
        params = {"index": index, "id": doc_id}
        if self.refresh:
            params["refresh"] = True

        with translate_errors():
            try:
                self.es.delete(**params)
            except NotFoundError:
                return False
        return True

    def search(self, index: str, body: dict, doc_type: Optional[str] = None) -> dict:
        with translate_errors():
            return _body(self.es.search(index=index, body=body))

    def engine_version(self) -> str:
        """Version number the cluster reports about itself"""
        with translate_errors():
            info = self.es.info()
        return info["version"]["number"]
