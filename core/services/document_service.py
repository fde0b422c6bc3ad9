# =============================================================================
# core/services/document_service.py - Document CRUD
# =============================================================================
# Generic list/get/create/delete over one Supabase table. The food and
# recipe routers each use an instance bound to their table.
# =============================================================================

import logging
from typing import Any

from app.exceptions import DatabaseError, DocumentNotFoundError
from lib.database import Database, is_no_rows_error

logger = logging.getLogger(__name__)


class DocumentService:
    """
    CRUD operations for documents in one table.

    Attributes:
        table: Supabase table name
        kind: Display name used in error messages ("Food", "Recipe")
        search_field: Column matched by the list filter
    """

    def __init__(self, database: Database, table: str, kind: str, search_field: str = "name"):
        self.database = database
        self.table = table
        self.kind = kind
        self.search_field = search_field

    def list(self, query: str | None = None, limit: int = 50) -> list[dict[str, Any]]:
        """
        List documents, newest first.

        Args:
            query: Case-insensitive substring filter on search_field
            limit: Maximum number of documents
        """
        request = self.database.table(self.table).select("*")
        if query:
            request = request.ilike(self.search_field, f"%{query}%")
        request = request.order("created_at", desc=True).limit(limit)

        try:
            response = request.execute()
        except Exception as e:
            logger.error(f"Failed to list {self.table}: {e}")
            raise DatabaseError(f"Failed to list {self.table}") from e
        return response.data or []

    def get(self, document_id: str) -> dict[str, Any]:
        """
        Get one document.

        Raises:
            DocumentNotFoundError: If no document has this id
        """
        try:
            response = (
                self.database.table(self.table)
                .select("*")
                .eq("id", document_id)
                .single()
                .execute()
            )
        except Exception as e:
            if is_no_rows_error(e):
                raise DocumentNotFoundError(self.kind, document_id) from e
            logger.error(f"Failed to fetch {self.table}/{document_id}: {e}")
            raise DatabaseError(f"Failed to fetch {self.kind.lower()}") from e

        if not response.data:
            raise DocumentNotFoundError(self.kind, document_id)
        return response.data

    def create(self, data: dict[str, Any], owner_id: str) -> dict[str, Any]:
        """Insert a document owned by owner_id and return the stored row."""
        row = {**data, "owner_id": owner_id}

        try:
            response = self.database.table(self.table).insert(row).execute()
        except Exception as e:
            logger.error(f"Failed to insert into {self.table}: {e}")
            raise DatabaseError(f"Failed to create {self.kind.lower()}") from e

        if not response.data:
            raise DatabaseError(f"Insert into {self.table} returned no data")

        document = response.data[0]
        logger.info(f"Created {self.kind.lower()} {document.get('id')} for {owner_id}")
        return document

    def delete(self, document_id: str, owner_id: str) -> None:
        """
        Delete a document owned by owner_id.

        Documents owned by someone else are reported as not found.
        """
        document = self.get(document_id)
        if str(document.get("owner_id")) != str(owner_id):
            raise DocumentNotFoundError(self.kind, document_id)

        try:
            self.database.table(self.table).delete().eq("id", document_id).execute()
        except Exception as e:
            logger.error(f"Failed to delete {self.table}/{document_id}: {e}")
            raise DatabaseError(f"Failed to delete {self.kind.lower()}") from e

        logger.info(f"Deleted {self.kind.lower()} {document_id}")
