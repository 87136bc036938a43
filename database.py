"""
MongoDB access.

The client is opened at application startup and shared by every request;
pymongo pools connections and is safe to use from FastAPI's worker threads.
Collection names follow the lowercase schema class name (User -> "user").
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from log_config import get_logger

logger = get_logger("database")

USERS = "user"
PROFILES = "profile"

_client: Optional[MongoClient] = None
_db: Optional[Database] = None


class DatabaseNotConfiguredError(RuntimeError):
    pass


def connect(database_url: str, database_name: str) -> Database:
    global _client, _db
    if _db is None:
        _client = MongoClient(database_url, tz_aware=True)
        _db = _client[database_name]
        logger.info("database_connected", database_name=database_name)
    return _db


def close() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


def get_db() -> Database:
    """FastAPI dependency returning the database handle opened at startup."""
    if _db is None:
        raise DatabaseNotConfiguredError("Database not configured: set DATABASE_URL and DATABASE_NAME")
    return _db


def get_optional_db() -> Optional[Database]:
    """Like get_db, but returns None when no database is configured."""
    try:
        return get_db()
    except DatabaseNotConfiguredError:
        return None


def ensure_indexes(db: Database) -> None:
    """One user per email and one profile per user."""
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[PROFILES].create_index([("user", ASCENDING)], unique=True)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_document(db: Database, collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    """Insert a document stamped with its creation date and return its id as a string."""
    data_dict = data.model_dump() if isinstance(data, BaseModel) else dict(data)
    data_dict.setdefault("date", utcnow())
    result = db[collection_name].insert_one(data_dict)
    return str(result.inserted_id)


def get_documents(db: Database, collection_name: str, filter_dict: Optional[Dict[str, Any]] = None,
                  limit: Optional[int] = None) -> List[Dict[str, Any]]:
    cursor = db[collection_name].find(filter_dict or {})
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id, returning None when it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None
