from __future__ import annotations

from unittest import mock

import pytest
from prometheus_client import REGISTRY

from index_rotator import IndexRotator, SecondaryDeletion

from conftest import InMemoryStore

CONFIG_INDEX = ".products_configuration"


@pytest.fixture
def history(rotator: IndexRotator, store: InMemoryStore) -> dict[str, str]:
    """Primary "live" plus secondaries a (t=1000), b (t=2000), c (t=3000).

    Physical indexes exist for a and c only.
    """
    rotator.set_primary_index("live")
    ids = {
        "a": store.add_document(CONFIG_INDEX, {"name": "a", "timestamp": 1_000}),
        "b": store.add_document(CONFIG_INDEX, {"name": "b", "timestamp": 2_000}),
        "c": store.add_document(CONFIG_INDEX, {"name": "c", "timestamp": 3_000}),
    }
    for name in ("live", "a", "c"):
        store.add_index(name)
    return ids


def test_prunes_existing_and_reports_missing(
    rotator: IndexRotator, store: InMemoryStore, history: dict[str, str]
) -> None:
    results = rotator.delete_secondary_indexes(2_500)

    assert list(results) == ["a", "b"]
    assert results["a"] == SecondaryDeletion(
        index="a", deleted=True, acknowledged=True, pointer_ids=[history["a"]]
    )
    assert results["b"].deleted is False
    assert results["b"].acknowledged is None

    assert store.deleted == ["a"]
    assert store.index_exists("c")
    assert store.index_exists("live")


def test_prune_removes_pointer_documents_by_default(
    rotator: IndexRotator, store: InMemoryStore, history: dict[str, str]
) -> None:
    rotator.delete_secondary_indexes(2_500)

    assert rotator.get_secondary_indexes() == ["c"]
    assert rotator.get_primary_index() == "live"


def test_prune_can_keep_pointer_documents(
    rotator: IndexRotator, store: InMemoryStore, history: dict[str, str]
) -> None:
    results = rotator.delete_secondary_indexes(2_500, remove_pointers=False)

    assert results["a"].pointer_ids == []
    assert rotator.get_secondary_indexes() == ["a", "b", "c"]
    assert not store.index_exists("a")


def test_prune_without_cutoff_removes_everything_but_primary(
    rotator: IndexRotator, store: InMemoryStore, history: dict[str, str]
) -> None:
    results = rotator.delete_secondary_indexes()

    assert sorted(results) == ["a", "b", "c"]
    assert store.deleted == ["a", "c"]
    assert store.index_exists("live")
    assert rotator.get_secondary_indexes() == []


def test_prune_with_no_history(rotator: IndexRotator, store: InMemoryStore) -> None:
    assert rotator.delete_secondary_indexes() == {}
    rotator.set_primary_index("live")
    assert rotator.delete_secondary_indexes() == {}


def test_repeated_name_is_deleted_once(rotator: IndexRotator, store: InMemoryStore) -> None:
    rotator.set_primary_index("live")
    first = store.add_document(CONFIG_INDEX, {"name": "a", "timestamp": 1_000})
    second = store.add_document(CONFIG_INDEX, {"name": "a", "timestamp": 1_500})
    store.add_index("a")

    results = rotator.delete_secondary_indexes(2_000)

    assert results["a"].deleted is True
    assert results["a"].pointer_ids == [first, second]
    assert store.deleted == ["a"]


def test_engine_error_aborts_remaining_deletions(
    rotator: IndexRotator, store: InMemoryStore, history: dict[str, str]
) -> None:
    real_delete = store.delete_index

    def failing_delete(name: str) -> dict:
        if name == "c":
            raise PermissionError("security_exception")
        return real_delete(name)

    store.add_index("b")
    with mock.patch.object(store, "delete_index", side_effect=failing_delete):
        with pytest.raises(PermissionError):
            rotator.delete_secondary_indexes()

    # a and b went before c failed; c and its pointer are left in place
    assert store.deleted == ["a", "b"]
    assert store.index_exists("c")
    assert rotator.get_secondary_indexes() == ["c"]


def test_prune_logs_outcomes(store: InMemoryStore, history: dict[str, str]) -> None:
    logger = mock.Mock()
    rotator = IndexRotator(store, "products", logger=logger)

    rotator.delete_secondary_indexes(2_500)

    events = [(c.args[0], c.kwargs["extra"]) for c in logger.debug.call_args_list]
    assert events == [
        ("Deleted secondary index.", {"index_name": "a"}),
        ("Index not found to delete.", {"index_name": "b"}),
    ]


def test_prune_counts_outcomes_in_metrics(store: InMemoryStore) -> None:
    rotator = IndexRotator(store, "metrics_prefix")
    config_index = rotator.configuration_index_name
    rotator.set_primary_index("live")
    store.add_document(config_index, {"name": "old_1", "timestamp": 1_000})
    store.add_document(config_index, {"name": "old_2", "timestamp": 1_000})
    store.add_index("old_1")

    rotator.delete_secondary_indexes()

    def sample(status: str) -> float | None:
        return REGISTRY.get_sample_value(
            "index_rotator_secondaries_deleted_total",
            {"prefix": "metrics_prefix", "status": status},
        )

    assert sample("deleted") == 1.0
    assert sample("missing") == 1.0


def test_prune_after_rollback_keeps_live_primary(rotator: IndexRotator, store: InMemoryStore) -> None:
    for name in ("A", "B"):
        store.add_index(name)
    rotator.rotate("A")
    rotator.rotate("B")
    rotator.rotate("A")
    assert rotator.get_secondary_indexes() == ["A", "B"]

    results = rotator.delete_secondary_indexes()

    assert results["A"] == SecondaryDeletion(
        index="A", deleted=False, pointer_ids=results["A"].pointer_ids, protected=True
    )
    assert len(results["A"].pointer_ids) == 1
    assert results["B"].deleted is True
    assert results["B"].protected is False
    assert store.index_exists("A")
    assert store.deleted == ["B"]
    assert rotator.get_primary_index() == "A"
    assert rotator.get_secondary_indexes() == []


def test_protected_primary_is_logged(store: InMemoryStore) -> None:
    logger = mock.Mock()
    rotator = IndexRotator(store, "products", logger=logger)
    store.add_index("A")
    rotator.rotate("A")
    rotator.rotate("B")
    rotator.rotate("A")
    logger.reset_mock()

    rotator.delete_secondary_indexes()

    events = [(c.args[0], c.kwargs["extra"]) for c in logger.debug.call_args_list]
    assert ("Skipped deleting primary index.", {"index_name": "A"}) in events
    assert ("Index not found to delete.", {"index_name": "B"}) in events
