# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database and storage
# operations used by the catalog:
# - Table CRUD for fruits, news, events, planifruits and appearance
# - Object storage upload / public URL / remove for media files
# - Small diagnostics helpers (row counts, bucket listing)
#
# One SupabaseClient instance is built at application start and handed to
# every store and service that needs it. Nothing in here knows about the
# catalog domain: rows go in and out as plain dicts with snake_case columns.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   db = SupabaseClient(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
#   rows = db.select_rows("news", order_by="created_at", desc=True)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: the message says what failed, the
    suggestion says what to check.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase table and storage operations.

    The underlying supabase Client is created on first use so that building
    the wrapper never touches the network.

    Example:
        db = SupabaseClient("https://xxx.supabase.co", "anon-key")

        row = db.insert_row("news", {"title": "Récolte 2024", ...})
        db.update_row("news", row["id"], {"published": True})

        path = db.upload_file("images", "uploads/a.jpg", data, "image/jpeg")
        url = db.get_public_url("images", path)
    """

    def __init__(self, url: str, key: str, client: Client | None = None):
        self.url = url
        self._key = key
        self._client = client

    def get_client(self) -> Client:
        """
        Get or create the Supabase client.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if self._client is None:
            try:
                self._client = create_client(self.url, self._key)
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
                )
        return self._client

    # -------------------------------------------------------------------------
    # Table Reads
    # -------------------------------------------------------------------------

    def select_rows(
        self,
        table: str,
        order_by: str | None = None,
        desc: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch every row of a table.

        Args:
            table: Table name
            order_by: Column to sort on (no ordering when None)
            desc: Sort descending
            limit: Maximum number of rows

        Returns:
            List of row dicts (empty list when the table is empty)

        Raises:
            SupabaseClientError: If query fails
        """
        client = self.get_client()

        try:
            query = client.table(table).select("*")
            if order_by:
                query = query.order(order_by, desc=desc)
            if limit is not None:
                query = query.limit(limit)

            response = query.execute()
            rows = response.data or []

            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch rows from {table}: {e}",
                code="SELECT_FAILED",
                suggestion=f"Check that the {table} table exists and is readable with the anon key",
                details={"table": table, "order_by": order_by}
            )

    def select_first(self, table: str, columns: str = "*") -> dict[str, Any] | None:
        """
        Fetch the first row of a table.

        Used for single-row tables such as appearance.

        Returns:
            Row dict, or None if the table is empty

        Raises:
            SupabaseClientError: If query fails
        """
        client = self.get_client()

        try:
            response = client.table(table).select(columns).limit(1).execute()
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch first row of {table}: {e}",
                code="SELECT_FAILED",
                details={"table": table}
            )

    def count_rows(self, table: str) -> int:
        """Return the exact row count of a table."""
        client = self.get_client()

        try:
            response = client.table(table).select("id", count="exact").limit(1).execute()
            return response.count or 0

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count rows of {table}: {e}",
                code="COUNT_FAILED",
                details={"table": table}
            )

    # -------------------------------------------------------------------------
    # Table Writes
    # -------------------------------------------------------------------------

    def insert_row(self, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a row and return it as stored.

        The returned row carries the id assigned by the database, along with
        any server-side defaults such as created_at.

        Raises:
            SupabaseClientError: If insert fails or returns nothing
        """
        client = self.get_client()

        try:
            response = client.table(table).insert(data).execute()

            if response.data:
                row = response.data[0]
                logger.debug(f"Inserted row {row.get('id')} into {table}")
                return row
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"table": table}
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                details={"table": table}
            )

    def update_row(
        self,
        table: str,
        row_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update the given columns of one row.

        Returns:
            Updated row dict, or None if no row matched

        Raises:
            SupabaseClientError: If update fails
        """
        client = self.get_client()

        try:
            response = client.table(table).update(data).eq("id", row_id).execute()
            logger.debug(f"Updated row {row_id} in {table}: {sorted(data)}")
            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table} row: {e}",
                code="UPDATE_FAILED",
                details={"table": table, "id": row_id}
            )

    def delete_row(self, table: str, row_id: str) -> None:
        """
        Delete one row by id.

        Raises:
            SupabaseClientError: If delete fails
        """
        client = self.get_client()

        try:
            client.table(table).delete().eq("id", row_id).execute()
            logger.debug(f"Deleted row {row_id} from {table}")

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete {table} row: {e}",
                code="DELETE_FAILED",
                details={"table": table, "id": row_id}
            )

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    def upload_file(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str,
    ) -> str:
        """
        Upload a file to a storage bucket.

        Uploads never overwrite: callers are expected to pick a fresh path.

        Returns:
            Storage path of the uploaded object, relative to the bucket

        Raises:
            SupabaseClientError: If upload fails
        """
        client = self.get_client()

        try:
            response = client.storage.from_(bucket).upload(
                path=path,
                file=content,
                file_options={
                    "content-type": content_type,
                    "cache-control": "3600",
                    "upsert": "false",
                }
            )
            stored_path = getattr(response, "path", None) or path
            logger.info(f"Uploaded file to storage: {bucket}/{stored_path}")
            return stored_path

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to upload {path} to {bucket}: {e}",
                code="UPLOAD_FAILED",
                suggestion=f"Check that the {bucket} bucket exists and accepts uploads",
                details={"bucket": bucket, "path": path}
            )

    def get_public_url(self, bucket: str, path: str) -> str:
        """Build the public URL of a stored object."""
        client = self.get_client()

        try:
            return client.storage.from_(bucket).get_public_url(path)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to get public URL: {e}",
                code="PUBLIC_URL_FAILED",
                details={"bucket": bucket, "path": path}
            )

    def remove_files(self, bucket: str, paths: list[str]) -> None:
        """
        Remove objects from a storage bucket.

        Raises:
            SupabaseClientError: If removal fails
        """
        client = self.get_client()

        try:
            client.storage.from_(bucket).remove(paths)
            logger.info(f"Removed from storage: {bucket}/{paths}")

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to remove files from {bucket}: {e}",
                code="REMOVE_FAILED",
                details={"bucket": bucket, "paths": paths}
            )

    def list_buckets(self) -> list[str]:
        """Return the names of the storage buckets visible to this key."""
        client = self.get_client()

        try:
            buckets = client.storage.list_buckets()
            return [getattr(bucket, "name", str(bucket)) for bucket in buckets]

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list storage buckets: {e}",
                code="LIST_BUCKETS_FAILED",
            )
