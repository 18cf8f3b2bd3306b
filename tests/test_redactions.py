"""
涂黑文档测试
"""

import pytest

from ghostroute.errors import MissingFieldError, StoreUnavailableError
from ghostroute.models import RedactionCreate
from ghostroute.services import RedactionService


async def test_create_and_list(db):
    service = RedactionService(db)
    first = await service.create(RedactionCreate(doc_text="SECRET memo", redacted_terms=["SECRET"]))
    second = await service.create(RedactionCreate(user="knox", doc_text="another", source_event=4))

    assert first["ok"] and second["id"] > first["id"]

    recent = await service.list_recent()
    assert [r["id"] for r in recent] == [second["id"], first["id"]]
    assert recent[0]["user"] == "knox"
    assert recent[1]["redacted_terms"] == ["SECRET"]
    assert "doc_text" not in recent[0]


async def test_doc_text_required(db):
    with pytest.raises(MissingFieldError):
        await RedactionService(db).create(RedactionCreate())


async def test_store_not_configured():
    with pytest.raises(StoreUnavailableError):
        await RedactionService(None).list_recent()
