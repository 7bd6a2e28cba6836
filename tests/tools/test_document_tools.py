"""Tests for document tools."""

import json

import pytest

from mecenas.tools.documents import watermark


async def call(dispatcher, session, tool, **args):
    return json.loads(await dispatcher.execute(tool, args, session))


def test_watermark_header():
    stamped = watermark("Treść", "cli:abcdef1234567890")
    first_line, second_line = stamped.splitlines()[:2]
    assert first_line.startswith("[MECENAS-AI | ")
    assert first_line.endswith("| sesja: cli:abcdef12]")
    assert second_line == "PROJEKT — WYMAGA WERYFIKACJI PRAWNIKA"
    assert stamped.endswith("\n\nTreść")


class TestDocumentTools:
    @pytest.mark.asyncio
    async def test_draft_is_watermarked_and_warns(self, dispatcher, session, store, client_and_case):
        _, legal_case = client_and_case

        result = await call(
            dispatcher,
            session,
            "draft_document",
            caseId=legal_case.id,
            type="pozew",
            title="Pozew o zapłatę",
            content="Wnoszę o zasądzenie kwoty 10 000 zł.",
        )

        assert result["success"] is True
        assert result["document"]["status"] == "szkic"
        warnings = " ".join(result["warnings"])
        assert "WPS" in warnings
        assert "uzasadnienie" in warnings
        doc = store.get_document(result["document"]["id"])
        assert doc.content.startswith("[MECENAS-AI | ")

    @pytest.mark.asyncio
    async def test_update_creates_version(self, dispatcher, session, store):
        doc = store.create_document(type="notatka", title="Notatka", content="v1")

        result = await call(dispatcher, session, "update_document", id=doc.id, content="v2")
        assert result["document"]["version"] == 2

        versions = await call(dispatcher, session, "list_document_versions", id=doc.id)
        assert versions["count"] == 2

    @pytest.mark.asyncio
    async def test_locked_document_cannot_be_edited_or_deleted(self, dispatcher, session, store):
        doc = store.create_document(type="pozew", title="Pozew", content="x", status="zlozony")

        edited = await call(dispatcher, session, "update_document", id=doc.id, content="y")
        deleted = await call(dispatcher, session, "delete_document", id=doc.id)

        assert "zlozony" in edited["error"]
        assert "zlozony" in deleted["error"]
        assert store.get_document(doc.id).content == "x"
