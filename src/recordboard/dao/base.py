"""Base DAO over the Supabase (PostgREST) client."""

from typing import Any, Generic, TypeVar
from uuid import UUID

import httpx
from postgrest.exceptions import APIError
from pydantic import BaseModel
from supabase import Client, create_client

from recordboard.config import get_settings
from recordboard.errors import DataStoreError, DuplicateSlugError, RecordBoardError

T = TypeVar("T", bound=BaseModel)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class SupabaseClient:
    """Process-wide Supabase client for the CLI and scripts.

    The API builds its own per-request clients via dependencies.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._instance is None:
            settings = get_settings()
            cls._instance = create_client(settings.supabase_url, settings.admin_key())
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the client (useful for testing)."""
        cls._instance = None


def translate_error(error: Exception, duplicate_message: str | None = None) -> RecordBoardError:
    """Map a data store exception onto the domain error taxonomy."""
    if isinstance(error, RecordBoardError):
        return error

    code = getattr(error, "code", None)
    message = getattr(error, "message", None) or str(error)
    lowered = message.lower()
    if code == UNIQUE_VIOLATION or "duplicate key" in lowered or "unique constraint" in lowered:
        return DuplicateSlugError(duplicate_message)
    return DataStoreError(message)


class BaseDAO(Generic[T]):
    """Base Data Access Object with common CRUD operations.

    Every call goes through `_run`, so callers only ever see RecordBoardError
    subclasses.
    """

    table_name: str
    model_class: type[T]
    duplicate_message: str | None = None

    def __init__(self, client: Client | None = None):
        self.client = client or SupabaseClient.get_client()

    @property
    def table(self):
        return self.client.table(self.table_name)

    def _run(self, query) -> Any:
        """Execute a query builder, translating data store failures."""
        try:
            return query.execute()
        except APIError as e:
            raise translate_error(e, self.duplicate_message) from e
        except httpx.HTTPError as e:
            raise DataStoreError(str(e) or type(e).__name__) from e

    def get_by_id(self, id: str | UUID) -> T | None:
        """Get a single row by id, or None."""
        result = self._run(self.table.select("*").eq("id", str(id)))
        if not result.data:
            return None
        return self._to_model(result.data[0])

    def get_all(self, limit: int = 100, offset: int = 0) -> list[T]:
        result = self._run(self.table.select("*").range(offset, offset + limit - 1))
        return [self._to_model(row) for row in result.data]

    def create(self, model: T) -> T:
        """Insert a row and return it with its id populated."""
        result = self._run(self.table.insert(self._to_db(model)))
        return self._to_model(result.data[0])

    def create_many(self, models: list[T]) -> list[T]:
        """Insert several rows in one request (all or nothing)."""
        if not models:
            return []
        result = self._run(self.table.insert([self._to_db(m) for m in models]))
        return [self._to_model(row) for row in result.data]

    def update(self, id: str | UUID, model: T) -> T | None:
        result = self._run(self.table.update(self._to_db(model)).eq("id", str(id)))
        if not result.data:
            return None
        return self._to_model(result.data[0])

    def partial_update(self, id: str | UUID, updates: dict) -> T | None:
        """Update only the given columns. None values are written as NULL."""
        if not updates:
            return self.get_by_id(id)
        data = {k: str(v) if isinstance(v, UUID) else v for k, v in updates.items()}
        result = self._run(self.table.update(data).eq("id", str(id)))
        if not result.data:
            return None
        return self._to_model(result.data[0])

    def delete(self, id: str | UUID) -> bool:
        """Delete a row. Returns False if nothing matched."""
        result = self._run(self.table.delete().eq("id", str(id)))
        return len(result.data) > 0

    def count(self) -> int:
        result = self._run(self.table.select("*", count="exact"))
        return result.count or 0

    def _to_model(self, row: dict) -> T:
        """Convert a database row to a model. Override for custom mapping."""
        return self.model_class(**row)

    def _to_db(self, model: T) -> dict:
        """Convert a model to a database row. Override for custom mapping."""
        data = model.model_dump(mode="json", exclude_none=True, exclude={"id", "created_at"})
        if getattr(model, "id", None):
            data["id"] = str(model.id)
        return data
