import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from pdf_service.infrastructure.database import DatabaseClient
from pdf_service.infrastructure.database.models import DocumentModel, UserModel
from pdf_service.models.document import utc_isoformat


def _user(user_id="user-1", email="alice@example.com"):
    return UserModel(user_id=user_id, name="Alice", email=email, password_hash="hash")


def _document(document_id, user_id="user-1", created_at=None, state="pending"):
    return DocumentModel(
        document_id=document_id,
        user_id=user_id,
        original_name=f"{document_id}.pdf",
        size_bytes=4,
        content_type="application/pdf",
        data=b"%PDF",
        extraction_state=state,
        created_at=created_at or datetime.now(timezone.utc),
    )


def run_with_db(tmp_path, scenario):
    async def _run():
        db = DatabaseClient(f"sqlite+aiosqlite:///{tmp_path / 'db.sqlite'}")
        await db.initialize()
        try:
            return await scenario(db)
        finally:
            await db.close()

    return asyncio.run(_run())


@pytest.mark.unit
class TestDatabaseClient:
    def test_health_check(self, tmp_path):
        async def scenario(db):
            return await db.health_check()

        assert run_with_db(tmp_path, scenario) is True

    def test_user_email_is_unique(self, tmp_path):
        async def scenario(db):
            await db.create_user(_user())
            with pytest.raises(IntegrityError):
                await db.create_user(_user(user_id="user-2"))

        run_with_db(tmp_path, scenario)

    def test_update_user_ignores_none(self, tmp_path):
        async def scenario(db):
            await db.create_user(_user())
            return await db.update_user("user-1", name="Alice B", email=None)

        updated = run_with_db(tmp_path, scenario)

        assert updated.name == "Alice B"
        assert updated.email == "alice@example.com"

    def test_list_documents_is_scoped_and_newest_first(self, tmp_path):
        now = datetime.now(timezone.utc)

        async def scenario(db):
            await db.create_document(_document("old", created_at=now - timedelta(minutes=5)))
            await db.create_document(_document("new", created_at=now))
            await db.create_document(_document("foreign", user_id="user-2"))
            return await db.list_documents("user-1")

        docs = run_with_db(tmp_path, scenario)

        assert [doc.document_id for doc in docs] == ["new", "old"]

    def test_set_extraction_state_overwrites_text_and_error(self, tmp_path):
        async def scenario(db):
            await db.create_document(_document("doc"))
            assert await db.set_extraction_state("doc", "completed", extracted_text="hello")
            completed = await db.get_document("doc")
            assert await db.set_extraction_state("doc", "pending")
            pending = await db.get_document("doc")
            return completed, pending

        completed, pending = run_with_db(tmp_path, scenario)

        assert completed.extraction_state == "completed"
        assert completed.extracted_text == "hello"
        assert pending.extraction_state == "pending"
        assert pending.extracted_text is None

    def test_set_extraction_state_on_missing_document(self, tmp_path):
        async def scenario(db):
            return await db.set_extraction_state("missing", "failed", error="x")

        assert run_with_db(tmp_path, scenario) is False

    def test_get_document_with_data(self, tmp_path):
        async def scenario(db):
            await db.create_document(_document("doc"))
            return await db.get_document("doc", include_data=True)

        assert run_with_db(tmp_path, scenario).data == b"%PDF"

    def test_delete_document(self, tmp_path):
        async def scenario(db):
            await db.create_document(_document("doc"))
            first = await db.delete_document("doc")
            second = await db.delete_document("doc")
            return first, second, await db.get_document("doc")

        assert run_with_db(tmp_path, scenario) == (True, False, None)

    def test_fail_pending_extractions_only_touches_pending(self, tmp_path):
        async def scenario(db):
            await db.create_document(_document("pending-1"))
            await db.create_document(_document("pending-2"))
            await db.create_document(_document("done", state="completed"))
            await db.set_extraction_state("done", "completed", extracted_text="kept")
            changed = await db.fail_pending_extractions("interrupted")
            docs = {doc_id: await db.get_document(doc_id) for doc_id in ("pending-1", "pending-2", "done")}
            return changed, docs

        changed, docs = run_with_db(tmp_path, scenario)

        assert changed == 2
        assert docs["pending-1"].extraction_state == "failed"
        assert docs["pending-1"].extraction_error == "interrupted"
        assert docs["done"].extraction_state == "completed"
        assert docs["done"].extracted_text == "kept"

    def test_timestamps_read_back_as_utc_iso(self, tmp_path):
        async def scenario(db):
            await db.create_document(_document("doc", created_at=datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)))
            return await db.get_document("doc")

        stored = run_with_db(tmp_path, scenario)

        assert utc_isoformat(stored.created_at) == "2025-03-01T12:00:00+00:00"
