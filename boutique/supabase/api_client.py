"""
Supabase API Client

Wrapper around the Supabase Python SDK for table access
(select/insert/update/upsert/delete) and Storage uploads.
Adds rate limiting, retries on transient failures and maps every SDK
or transport error to SupabaseError.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import httpx
from postgrest.exceptions import APIError
from storage3.utils import StorageException
from supabase import Client, ClientOptions, SupabaseException, create_client

from ..common.config_loader import get_supabase_credentials

logger = logging.getLogger(__name__)

# PostgREST / Postgres codes for a table that does not exist
MISSING_TABLE_CODES = {'42P01', 'PGRST205'}

Filters = Dict[str, Any]
Ordering = Sequence[Tuple[str, bool]]
Payload = Union[Dict[str, Any], List[Dict[str, Any]]]


class SupabaseError(Exception):
    """Error returned by the Supabase REST or Storage API."""

    def __init__(self, message: str, code: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status

    def is_missing_table(self, table: str) -> bool:
        """True if this error means ``table`` has not been created yet."""
        if self.code in MISSING_TABLE_CODES:
            return True
        lowered = self.message.lower()
        return 'could not find the table' in lowered and table.lower() in lowered


class SupabaseNotConfiguredError(SupabaseError):
    """Raised when the project URL or public key is missing."""


def error_from_api(error: APIError) -> SupabaseError:
    """
    Convert a PostgREST APIError.

    The SDK reports responses it cannot decode (gateway pages, proxies)
    with the HTTP status as the error code; those become ``status``.
    """
    code = str(error.code) if error.code is not None else None
    message = error.message or str(error)

    if code and code.isdigit():
        status = int(code)
        if status < 400:
            message = f"Invalid JSON response (HTTP {status})"
        return SupabaseError(message, status=status)

    return SupabaseError(message, code=code)


def error_from_storage(error: StorageException) -> SupabaseError:
    message = getattr(error, 'message', None) or str(error)
    status = getattr(error, 'status', None)
    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None
    code = getattr(error, 'code', None)
    return SupabaseError(str(message), code=str(code) if code else None, status=status)


class SupabaseClient:
    """
    Shared client for a Supabase project.

    Handles:
    - SDK client creation from URL and public key
    - Rate limiting
    - Retries on 429 and gateway errors
    - Equality filters and ordering
    - Storage uploads and public URLs

    Usage:
        client = SupabaseClient(url="https://xyz.supabase.co", key="anon-key")

        rows = client.select("products", order=[("created_at", False)])
        client.update("orders", {"status": "paid"}, {"id": order_id})
    """

    MAX_RETRIES = 5
    RETRYABLE_STATUS_CODES = {429, 502, 503, 504}

    def __init__(self, url: str, key: str, timeout: int = 30, client: Optional[Client] = None):
        """
        Initialize the API client.

        Args:
            url: Project URL (e.g. https://xyz.supabase.co)
            key: Public (anon/publishable) API key
            timeout: Request timeout in seconds
            client: Prebuilt SDK client (created from url and key if None)
        """
        if not url or not key:
            raise SupabaseNotConfiguredError(
                "Supabase is not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY in .env."
            )

        self.url = url.rstrip('/')
        self.key = key
        self.timeout = timeout

        if client is None:
            try:
                client = create_client(
                    self.url,
                    key,
                    options=ClientOptions(
                        postgrest_client_timeout=timeout,
                        storage_client_timeout=timeout,
                    ),
                )
            except SupabaseException as e:
                raise SupabaseNotConfiguredError(f"Invalid Supabase configuration: {e}") from e
        self.client = client

        # Rate limiting
        self.requests_made = 0
        self.last_request_time = 0.0
        self.min_request_interval = 0.1

    @classmethod
    def from_env(cls) -> 'SupabaseClient':
        """Create a client from SUPABASE_URL / SUPABASE_ANON_KEY (or their aliases)."""
        url, key = get_supabase_credentials()
        return cls(url=url, key=key)

    def _rate_limit(self):
        """Keep at least min_request_interval seconds between requests."""
        now = time.time()
        elapsed = now - self.last_request_time

        if elapsed < self.min_request_interval:
            time.sleep(self.min_request_interval - elapsed)

        self.last_request_time = time.time()
        self.requests_made += 1

    def execute(self, description: str, operation: Callable[[], Any]) -> Any:
        """
        Run an SDK call with rate limiting, retries and error mapping.

        Args:
            description: Short label for logs (e.g. "select products")
            operation: Zero-argument callable performing the SDK call

        Returns:
            Whatever operation returns

        Raises:
            SupabaseError: On API errors, transport failure, undecodable
                responses or exhausted retries
        """
        for attempt in range(self.MAX_RETRIES):
            self._rate_limit()

            try:
                return operation()
            except APIError as e:
                error = error_from_api(e)
            except StorageException as e:
                error = error_from_storage(e)
            except httpx.TimeoutException as e:
                logger.error("Request timeout: %s", description)
                raise SupabaseError(f"Request timeout: {description}") from e
            except httpx.HTTPError as e:
                logger.error("Request failed: %s", e)
                raise SupabaseError(f"Request failed: {e}") from e
            except ValueError as e:
                logger.error("Invalid JSON response for %s: %s", description, e)
                raise SupabaseError(f"Invalid JSON response for {description}") from e

            # Retry on rate limiting or gateway errors
            if error.status in self.RETRYABLE_STATUS_CODES:
                delay = 2 ** attempt
                logger.warning("HTTP %d on %s, retry %d/%d in %ds...",
                               error.status, description, attempt + 1,
                               self.MAX_RETRIES, delay)
                time.sleep(delay)
                continue

            logger.error("API Error %s (%s): %s", error.status, error.code, error.message)
            raise error

        logger.error("Max retries (%d) exceeded for %s", self.MAX_RETRIES, description)
        raise SupabaseError(f"Max retries exceeded for {description}")

    # -- Tables --------------------------------------------------------------

    @staticmethod
    def _apply_filters(query, filters: Optional[Filters]):
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        return query

    def select(
        self,
        table: str,
        columns: str = '*',
        filters: Optional[Filters] = None,
        order: Optional[Ordering] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Select rows from a table.

        Args:
            table: Table name
            columns: Select expression (e.g. "*, order_items(*)")
            filters: Column equality filters
            order: (column, ascending) pairs, applied in sequence
            limit: Maximum number of rows

        Returns:
            List of row dicts
        """
        def run():
            query = self._apply_filters(self.client.table(table).select(columns), filters)
            for column, ascending in order or []:
                query = query.order(column, desc=not ascending)
            if limit is not None:
                query = query.limit(limit)
            return query.execute()

        response = self.execute(f"select {table}", run)
        return response.data or []

    def select_one(
        self,
        table: str,
        filters: Filters,
        columns: str = '*',
    ) -> Optional[Dict[str, Any]]:
        """Return the single matching row, or None when nothing matches."""
        rows = self.select(table, columns=columns, filters=filters, limit=1)
        return rows[0] if rows else None

    def insert(self, table: str, payload: Payload) -> List[Dict[str, Any]]:
        """Insert one row (dict) or many (list) and return the stored rows."""
        response = self.execute(
            f"insert {table}",
            lambda: self.client.table(table).insert(payload).execute(),
        )
        return response.data or []

    def update(self, table: str, payload: Dict[str, Any], filters: Filters) -> List[Dict[str, Any]]:
        """Update matching rows and return them."""
        if not filters:
            raise ValueError("update() requires at least one filter")
        response = self.execute(
            f"update {table}",
            lambda: self._apply_filters(self.client.table(table).update(payload), filters).execute(),
        )
        return response.data or []

    def upsert(self, table: str, payload: Payload, on_conflict: str = 'id') -> List[Dict[str, Any]]:
        """Insert or merge on the on_conflict column and return the stored rows."""
        response = self.execute(
            f"upsert {table}",
            lambda: self.client.table(table).upsert(payload, on_conflict=on_conflict).execute(),
        )
        return response.data or []

    def delete(self, table: str, filters: Filters) -> None:
        """Delete matching rows."""
        if not filters:
            raise ValueError("delete() requires at least one filter")
        self.execute(
            f"delete {table}",
            lambda: self._apply_filters(self.client.table(table).delete(), filters).execute(),
        )

    # -- Storage -------------------------------------------------------------

    def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str = 'application/octet-stream',
        upsert: bool = False,
        cache_control: str = '3600',
    ) -> str:
        """
        Upload a file to a storage bucket.

        Args:
            bucket: Bucket name
            path: Object path inside the bucket
            content: File bytes
            content_type: MIME type
            upsert: Overwrite an existing object
            cache_control: max-age in seconds

        Returns:
            The object path
        """
        self.execute(
            f"upload {bucket}/{path}",
            lambda: self.client.storage.from_(bucket).upload(
                path=path,
                file=content,
                file_options={
                    "content-type": content_type,
                    "cache-control": cache_control,
                    "upsert": "true" if upsert else "false",
                },
            ),
        )
        return path

    def public_url(self, bucket: str, path: str) -> str:
        """Public URL of an object in a public bucket."""
        return self.client.storage.from_(bucket).get_public_url(path).rstrip('?')

    def test_connection(self, table: str = 'products') -> bool:
        """
        Test API connection by selecting one row.

        Returns:
            True if connection successful
        """
        try:
            self.select(table, columns='id', limit=1)
        except SupabaseError as e:
            logger.error("Connection test failed: %s", e)
            return False
        logger.info("Connected to: %s", self.url)
        return True
