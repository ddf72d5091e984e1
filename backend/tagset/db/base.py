from __future__ import annotations

from functools import lru_cache

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from tagset.config import settings
from tagset.utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_mongo_client() -> AsyncIOMotorClient:
    """Return a cached motor client for the configured MongoDB URL."""
    logger.debug("Initializing MongoDB client")
    if not settings.mongo_url:
        raise RuntimeError("mongo_url is required for the mongo store")
    return AsyncIOMotorClient(settings.mongo_url)


def get_mongo_collection(name: str) -> AsyncIOMotorCollection:
    return get_mongo_client()[settings.mongo_database][name]


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Return a cached Supabase client.

    Sessions are not persisted; the key decides which RLS policies apply.
    """
    logger.debug("Initializing Supabase client")
    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError("supabase_url and supabase_key are required for the supabase store")
    return create_client(
        settings.supabase_url,
        settings.supabase_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
