"""
Primary/secondary index rotation backed by a configuration index

The configuration index holds a singleton "primary" pointer document and
one append-only pointer document per demoted primary. A rotation is:

    rotator.copy_primary_index_to_secondary()
    rotator.set_primary_index("products_20240102")

Nothing here locks: two concurrent rotations on the same prefix can
interleave between the read and the writes.
"""

import logging
import time
from datetime import datetime
from typing import Dict, List, Optional, Union

from .. import metrics
from ..exceptions import (
    DocumentNotFound,
    MissingPrimaryIndex,
    PrimaryIndexCopyFailure,
    TransientStoreError,
)
from .config_schema import (
    PRIMARY_ID,
    get_configuration_index_name,
    get_configuration_mapping,
    get_document_type,
)
from .models import PointerDocument, RotatorSettings, SecondaryDeletion, to_epoch_seconds
from .query import build_secondary_query, parse_version

Cutoff = Union[datetime, int, float, None]


def _hits_total(hits: dict, default: int) -> int:
    """hits.total is an int before 7.0 and {"value": n} after"""
    total = hits.get("total", default)
    if isinstance(total, dict):
        return int(total.get("value", default))
    return int(total)


class IndexRotator:
    """Tracks the primary index for a prefix and its rotation history"""

    def __init__(
        self,
        store,
        prefix: str,
        logger: logging.Logger = None,
        settings: RotatorSettings = None
    ):
        """
        Args:
            store: ElasticsearchStore (or any object with the same methods)
            prefix: Identifier of the dataset whose rotation this manages
            logger: Receives debug events; silent package logger by default
            settings: Retry and search tunables
        """
        self.store = store
        self.prefix = prefix
        self.logger = logger or logging.getLogger(__name__)
        self.settings = settings or RotatorSettings()
        self.configuration_index_name = get_configuration_index_name(prefix)

    def _document_type(self) -> Optional[str]:
        return get_document_type(parse_version(self.store.engine_version()))

    # Configuration index

    def ensure_configuration_index(self) -> bool:
        """
        Create the configuration index if it does not exist yet

        Returns:
            True if the index was created, False if it already existed
        """
        if self.store.index_exists(self.configuration_index_name):
            return False

        version = parse_version(self.store.engine_version())
        self.store.create_index(
            self.configuration_index_name,
            get_configuration_mapping(version)
        )
        self.logger.debug(
            "Configuration index created.",
            extra={"index": self.configuration_index_name}
        )
        return True

    def get_primary_index(self) -> str:
        """
        Name of the index live traffic should query

        Raises:
            MissingPrimaryIndex: No configuration index or no primary set yet
        """
        if not self.store.index_exists(self.configuration_index_name):
            raise MissingPrimaryIndex("Configuration index not available.")

        try:
            primary = self.store.get_document(
                self.configuration_index_name,
                PRIMARY_ID,
                doc_type=self._document_type()
            )
        except DocumentNotFound as e:
            raise MissingPrimaryIndex("Primary index not set.") from e

        return primary["_source"]["name"]

    def set_primary_index(self, name: str):
        """Point the primary at `name`, creating the configuration index on first use"""
        self.ensure_configuration_index()

        pointer = PointerDocument(name=name, id=PRIMARY_ID)
        self.store.put_document(
            self.configuration_index_name,
            pointer.to_es_doc(),
            doc_id=PRIMARY_ID,
            doc_type=self._document_type()
        )

        self.logger.debug("Primary index set.", extra={"index_name": name})
        metrics.inc_primary_set(self.prefix)

    # Rotation

    def copy_primary_index_to_secondary(self) -> str:
        """
        Record the current primary as a secondary entry.

        Transient read failures are retried with a fixed delay, up to
        `max_retry_count` retries after the first attempt. The primary
        itself is left untouched.

        Returns:
            ID of the newly created secondary entry

        Raises:
            MissingPrimaryIndex: No primary to copy
            PrimaryIndexCopyFailure: Every read attempt failed transiently
        """
        self.ensure_configuration_index()

        retry_count = 0
        while True:
            try:
                primary_name = self.get_primary_index()
                break
            except TransientStoreError as e:
                self.logger.debug(
                    "Unable to get primary index.",
                    extra={"error": str(e), "retry_count": retry_count}
                )
                if retry_count >= self.settings.max_retry_count:
                    metrics.inc_copy_failure(self.prefix)
                    raise PrimaryIndexCopyFailure(
                        "Unable to copy primary to secondary index."
                    ) from e
                retry_count += 1
                metrics.inc_primary_read_retry(self.prefix)
                time.sleep(self.settings.retry_delay)

        pointer = PointerDocument(name=primary_name)
        secondary_id = self.store.put_document(
            self.configuration_index_name,
            pointer.to_es_doc(),
            doc_type=self._document_type()
        )

        self.logger.debug("Secondary entry created.", extra={"id": secondary_id})
        metrics.inc_secondary_created(self.prefix)
        return secondary_id

    def rotate(self, name: str) -> Optional[str]:
        """
        Demote the current primary and promote `name`

        On first use there is no primary to demote and only the primary
        is written.

        Returns:
            ID of the secondary entry, or None when bootstrapping
        """
        try:
            secondary_id = self.copy_primary_index_to_secondary()
        except MissingPrimaryIndex:
            secondary_id = None

        self.set_primary_index(name)
        return secondary_id

    # History

    def get_secondary_entries(self, older_than: Cutoff = None) -> List[PointerDocument]:
        """
        Secondary pointer documents demoted before `older_than`, in insertion order

        At most `search_size` entries are returned; a debug event reports
        how many matched when the result was cut short.
        """
        if not self.store.index_exists(self.configuration_index_name):
            return []

        version = self.store.engine_version()
        body = build_secondary_query(
            version,
            to_epoch_seconds(older_than),
            self.settings.search_size
        )
        results = self.store.search(
            self.configuration_index_name,
            body,
            doc_type=get_document_type(parse_version(version))
        )

        hits = results["hits"]["hits"]
        total = _hits_total(results["hits"], len(hits))
        if total > len(hits):
            self.logger.debug(
                "Secondary history truncated.",
                extra={"total": total, "returned": len(hits)}
            )
        return [PointerDocument.from_hit(hit) for hit in hits]

    def get_secondary_indexes(self, older_than: Cutoff = None) -> List[str]:
        """
        Names of secondary indexes demoted before `older_than`

        If `older_than` is omitted, all secondary indexes are returned.
        """
        return [entry.name for entry in self.get_secondary_entries(older_than)]

    # Pruning

    def delete_secondary_indexes(
        self,
        older_than: Cutoff = None,
        remove_pointers: bool = True
    ) -> Dict[str, SecondaryDeletion]:
        """
        Delete secondary indexes demoted before `older_than`.

        Indexes already gone are reported, not treated as errors. An entry
        naming the current primary (left behind by a rollback) never has
        its index deleted; it is reported as protected. Pointer documents
        of pruned entries are removed too unless `remove_pointers` is
        False. The first engine error aborts the run; deletions made
        before it stay done.

        If `older_than` is omitted, all secondary indexes are deleted.

        Returns:
            Outcome per index name
        """
        results: Dict[str, SecondaryDeletion] = {}

        with metrics.track_latency(metrics.observe_prune_latency):
            entries = self.get_secondary_entries(older_than)
            if not entries:
                return results

            try:
                primary_name = self.get_primary_index()
            except MissingPrimaryIndex:
                primary_name = None

            doc_type = self._document_type()
            for entry in entries:
                if entry.name not in results:
                    if entry.name == primary_name:
                        results[entry.name] = self._protect_primary(entry.name)
                    else:
                        results[entry.name] = self._delete_index(entry.name)

                if remove_pointers and entry.id is not None:
                    self.store.delete_document(
                        self.configuration_index_name,
                        entry.id,
                        doc_type=doc_type
                    )
                    results[entry.name].pointer_ids.append(entry.id)

        return results

    def _protect_primary(self, index_name: str) -> SecondaryDeletion:
        self.logger.debug("Skipped deleting primary index.", extra={"index_name": index_name})
        metrics.inc_secondary_deleted(self.prefix, status="protected")
        return SecondaryDeletion(index=index_name, deleted=False, protected=True)

    def _delete_index(self, index_name: str) -> SecondaryDeletion:
        """Delete one physical index if it exists"""
        if not self.store.index_exists(index_name):
            self.logger.debug("Index not found to delete.", extra={"index_name": index_name})
            metrics.inc_secondary_deleted(self.prefix, status="missing")
            return SecondaryDeletion(index=index_name, deleted=False)

        response = self.store.delete_index(index_name)
        self.logger.debug("Deleted secondary index.", extra={"index_name": index_name})
        metrics.inc_secondary_deleted(self.prefix, status="deleted")
        return SecondaryDeletion(
            index=index_name,
            deleted=True,
            acknowledged=response.get("acknowledged")
        )
