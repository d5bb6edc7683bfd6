"""
Elasticsearch client initialization and rotator factory
"""

import logging

from elasticsearch import Elasticsearch

from index_rotator import get_env
from index_rotator.rotation import ElasticsearchStore, IndexRotator, RotatorSettings


def create_es_client(
    hosts: list = None,
    es_url: str = None,
    api_key: str = None,
    **kwargs
) -> Elasticsearch:
    """
    Create and configure Elasticsearch client

    Args:
        hosts: List of ES host URLs (e.g., ["http://localhost:9200"])
        es_url: Single ES URL (alternative to hosts)
        api_key: API key for Elastic Cloud (defaults to ES_API_KEY)
        **kwargs: Additional Elasticsearch client options

    Returns:
        Configured Elasticsearch client
    """
    # Priority: explicit params > env vars > defaults
    if hosts is None and es_url is None:
        es_url = get_env("ES_URL", "http://localhost:9200")

    if es_url:
        hosts = [es_url]

    api_key = api_key or get_env("ES_API_KEY", "")
    if api_key:
        kwargs.setdefault("api_key", api_key)

    es = Elasticsearch(hosts, **kwargs)

    # Verify connection
    if not es.ping():
        raise ConnectionError(f"Cannot connect to Elasticsearch at {hosts}")

    return es


def get_es_info(es_client: Elasticsearch) -> dict:
    """Get Elasticsearch cluster info"""
    return es_client.info()


def create_index_rotator(
    es_client: Elasticsearch,
    prefix: str,
    logger: logging.Logger = None,
    settings: RotatorSettings = None
) -> IndexRotator:
    """
    Build an IndexRotator for `prefix` on an existing client

    Settings default to the ROTATOR_* environment variables.
    """
    settings = settings or RotatorSettings.from_env()
    store = ElasticsearchStore(es_client, refresh=settings.refresh)
    return IndexRotator(store, prefix, logger=logger, settings=settings)
