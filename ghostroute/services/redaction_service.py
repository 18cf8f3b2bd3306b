"""
涂黑文档服务
"""

from typing import Any, Dict, List, Optional

from ghostroute.db.base import Database
from ghostroute.db.dao import RedactionDAO
from ghostroute.errors import MissingFieldError, StoreUnavailableError
from ghostroute.models import RedactionCreate


class RedactionService:
    """涂黑文档服务"""

    def __init__(self, db: Optional[Database]):
        self.db = db

    def _require_db(self) -> Database:
        if self.db is None:
            raise StoreUnavailableError("Database is not configured")
        return self.db

    async def create(self, data: RedactionCreate) -> Dict[str, Any]:
        if not data.doc_text:
            raise MissingFieldError("doc_text")

        async def work(session):
            return await RedactionDAO.create(
                session,
                doc_text=data.doc_text,
                user=data.user,
                redacted_terms=data.redacted_terms,
                source_event=data.source_event,
                notes=data.notes,
            )

        redaction = await self._require_db().run_in_transaction(work, lock_partition=False)
        return {"ok": True, "id": redaction.id}

    async def list_recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        redactions = await self._require_db().run_read(
            lambda session: RedactionDAO.list_recent(session, limit)
        )

        return [
            {
                "id": r.id,
                "created_at": r.created_at.isoformat() if r.created_at else None,
                "user": r.user,
                "redacted_terms": r.redacted_terms,
                "source_event": r.source_event,
                "notes": r.notes,
            }
            for r in redactions
        ]
