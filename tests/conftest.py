from __future__ import annotations

import itertools

import pytest

from index_rotator import DocumentNotFound, IndexRotator, RotatorSettings


class InMemoryStore:
    """Store fake that keeps indexes and documents in dicts.

    Search understands the two secondary-history query shapes: range
    filter inside bool (>= 2.0) or as a top-level sibling (1.x).
    """

    def __init__(self, version: str = "8.11.0") -> None:
        self.version = version
        self.indices: dict[str, dict] = {}
        self.created: list[str] = []
        self.deleted: list[str] = []
        self.searches: list[dict] = []
        self.doc_types: list[tuple[str, str | None]] = []
        self._ids = itertools.count(1)

    def add_index(self, name: str) -> None:
        self.indices[name] = {"body": {}, "docs": {}}

    def add_document(self, index: str, body: dict, doc_id: str | None = None) -> str:
        return self.put_document(index, body, doc_id=doc_id)

    def index_exists(self, name: str) -> bool:
        return name in self.indices

    def create_index(self, name: str, body: dict) -> dict:
        if name in self.indices:
            raise RuntimeError(f"resource_already_exists_exception: {name}")
        self.indices[name] = {"body": body, "docs": {}}
        self.created.append(name)
        return {"acknowledged": True, "index": name}

    def delete_index(self, name: str) -> dict:
        if name not in self.indices:
            raise RuntimeError(f"index_not_found_exception: {name}")
        del self.indices[name]
        self.deleted.append(name)
        return {"acknowledged": True}

    def get_document(self, index: str, doc_id: str, doc_type: str | None = None) -> dict:
        self.doc_types.append(("get", doc_type))
        docs = self.indices.get(index, {}).get("docs", {})
        if doc_id not in docs:
            raise DocumentNotFound(index, doc_id)
        return {"_id": doc_id, "_source": dict(docs[doc_id])}

    def put_document(
        self, index: str, body: dict, doc_id: str | None = None, doc_type: str | None = None
    ) -> str:
        self.doc_types.append(("put", doc_type))
        if index not in self.indices:
            raise RuntimeError(f"index_not_found_exception: {index}")
        doc_id = doc_id or f"auto-{next(self._ids)}"
        self.indices[index]["docs"][doc_id] = dict(body)
        return doc_id

    def delete_document(self, index: str, doc_id: str, doc_type: str | None = None) -> bool:
        self.doc_types.append(("delete", doc_type))
        docs = self.indices.get(index, {}).get("docs", {})
        return docs.pop(doc_id, None) is not None

    def search(self, index: str, body: dict, doc_type: str | None = None) -> dict:
        self.searches.append(body)
        self.doc_types.append(("search", doc_type))
        bool_query = body["query"]["bool"]
        excluded = bool_query["must_not"]["term"]["_id"]
        range_filter = bool_query.get("filter") or body["filter"]
        cutoff = range_filter["range"]["timestamp"]["lt"]

        matches = [
            {"_id": doc_id, "_source": dict(doc)}
            for doc_id, doc in self.indices[index]["docs"].items()
            if doc_id != excluded and doc["timestamp"] < cutoff
        ]
        return {"hits": {"total": {"value": len(matches)}, "hits": matches[: body["size"]]}}

    def engine_version(self) -> str:
        return self.version

    def pointer_names(self, index: str) -> dict[str, str]:
        return {
            doc_id: doc["name"]
            for doc_id, doc in self.indices[index]["docs"].items()
        }


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def rotator(store: InMemoryStore) -> IndexRotator:
    return IndexRotator(store, "products", settings=RotatorSettings(retry_delay=0))
