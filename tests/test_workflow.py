"""Tests for the import session lifecycle."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from cabinetbox.config.schema import ImportConfig
from cabinetbox.exceptions import ImportFileError, ImportInProgressError, ImportPreconditionError
from cabinetbox.models.import_session import ImportSession, ImportStatus, RecordResult
from cabinetbox.schemas.import_schemas import ImportDefaults
from cabinetbox.services.import_service import load_file, run_import

from conftest import make_csv, make_product, make_row


def _loaded_session(count: int) -> ImportSession:
    session = ImportSession()
    session.mapped_rows = [make_product(i) for i in range(count)]
    session.status = ImportStatus.PARSED
    return session


class TestSessionReset:
    """The single reset entry point."""

    def test_reset_restores_initial_state(self):
        session = _loaded_session(3)
        session.filename = "export.csv"
        session.progress = 100
        session.error_message = "boom"

        session.reset()

        assert session == ImportSession()

    def test_reset_does_not_share_lists(self):
        first = ImportSession()
        first.reset()
        first.failures.append(RecordResult(sku="W-1", success=False))
        assert ImportSession().failures == []

    def test_reset_rejected_while_importing(self):
        session = _loaded_session(3)
        session.is_importing = True

        with pytest.raises(ImportInProgressError):
            session.reset()
        assert len(session.mapped_rows) == 3

    def test_message_prefers_error(self):
        session = ImportSession(success_message="ok", error_message="bad")
        assert session.message == "bad"


class TestLoadFile:
    """Parsing and mapping into a session."""

    def test_load_file(self, sample_csv):
        session = load_file(ImportSession(), "export.csv", sample_csv)

        assert session.status == ImportStatus.PARSED
        assert session.filename == "export.csv"
        assert len(session.parsed_rows) == 3
        assert len(session.mapped_rows) == 3
        assert session.low_confidence_count == 1
        assert session.is_parsing is False
        assert session.message == "3 rows mapped successfully from 3 parsed."

    def test_preview_is_limited(self):
        rows = [make_row(SKU=f"AZ-{i}", Name="Acme Shaker Wall Cabinet 9W X 30H") for i in range(15)]
        session = load_file(ImportSession(), "export.csv", make_csv(rows), ImportConfig(preview_size=10))

        assert len(session.mapped_rows) == 15
        assert [p.primary_sku for p in session.preview_rows] == [f"W-{i}" for i in range(10)]

    def test_load_replaces_previous_file(self, sample_csv):
        session = load_file(ImportSession(), "first.csv", sample_csv)
        session.progress = 100

        content = make_csv([make_row(SKU="AZ-ONLY", Name="Acme Shaker Wall Cabinet 9W X 30H")])
        load_file(session, "second.csv", content)

        assert session.filename == "second.csv"
        assert [p.primary_sku for p in session.mapped_rows] == ["W-ONLY"]
        assert session.progress == 0

    def test_structural_error_leaves_no_rows(self, sample_csv):
        session = load_file(ImportSession(), "good.csv", sample_csv)

        with pytest.raises(ImportFileError, match="Parse errors"):
            load_file(session, "bad.csv", b"SKU,Name\nAZ-1,Acme,extra\n")

        assert session.status == ImportStatus.FAILED
        assert session.parsed_rows == []
        assert session.mapped_rows == []
        assert session.is_parsing is False
        assert "Parse errors" in session.message

    def test_rejected_extension(self, sample_csv):
        session = ImportSession()
        with pytest.raises(ImportFileError, match="Please select a valid file"):
            load_file(session, "export.txt", sample_csv)
        assert session.status == ImportStatus.FAILED

    def test_oversized_file(self, sample_csv):
        config = ImportConfig(max_upload_mb=0)
        with pytest.raises(ImportFileError, match="maximum size"):
            load_file(ImportSession(), "export.csv", sample_csv, config)

    def test_load_rejected_while_importing(self, sample_csv):
        session = _loaded_session(2)
        session.is_importing = True

        with pytest.raises(ImportInProgressError):
            load_file(session, "export.csv", sample_csv)
        assert len(session.mapped_rows) == 2


class TestRunImport:
    """Import runs against a loaded session."""

    @pytest.mark.asyncio
    async def test_complete_run(self):
        session = _loaded_session(25)
        create = AsyncMock(side_effect=lambda p: {"wSKU": p.primary_sku})
        seen_progress = []

        result = await run_import(
            session, create, batch_size=10, on_batch=lambda b: seen_progress.append(session.progress)
        )

        assert seen_progress == [40, 80, 100]
        assert result.imported_count == 25
        assert session.status == ImportStatus.COMPLETED
        assert session.progress == 100
        assert session.imported_count == 25
        assert session.total_count == 25
        assert session.is_importing is False
        assert session.message == "Successfully imported 25 rows!"

    @pytest.mark.asyncio
    async def test_partial_run(self):
        session = _loaded_session(5)

        async def create(product):
            if product.primary_sku == "W-2":
                raise RuntimeError("rejected")
            return {"wSKU": product.primary_sku}

        await run_import(session, create)

        assert session.status == ImportStatus.PARTIAL
        assert session.imported_count == 4
        assert [f.sku for f in session.failures] == ["W-2"]
        assert session.message == "Imported 4 of 5 rows. Check logs for errors."

    @pytest.mark.asyncio
    async def test_empty_session(self):
        session = ImportSession()
        create = AsyncMock()

        with pytest.raises(ImportPreconditionError):
            await run_import(session, create)

        assert session.message == "Invalid form or no rows to import."
        assert session.status == ImportStatus.FAILED
        assert session.is_importing is False
        create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_zero_batch_size_fails_session(self):
        session = _loaded_session(3)
        session.status = ImportStatus.COMPLETED
        create = AsyncMock()

        with pytest.raises(ImportPreconditionError, match="Batch size must be at least 1"):
            await run_import(session, create, batch_size=0)

        assert session.status == ImportStatus.FAILED
        assert session.message == "Batch size must be at least 1, got 0"
        assert len(session.mapped_rows) == 3
        create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_second_run_rejected_while_active(self):
        session = _loaded_session(4)
        release = asyncio.Event()

        async def create(product):
            await release.wait()
            return {"wSKU": product.primary_sku}

        first = asyncio.create_task(run_import(session, create, batch_size=2))
        await asyncio.sleep(0)
        assert session.is_importing is True
        assert session.status == ImportStatus.IMPORTING

        with pytest.raises(ImportInProgressError):
            await run_import(session, create)
        with pytest.raises(ImportInProgressError):
            session.reset()

        release.set()
        await first
        assert session.status == ImportStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_defaults_passed_through(self):
        session = _loaded_session(2)
        create = AsyncMock(side_effect=lambda p: {"wSKU": p.primary_sku})

        await run_import(session, create, ImportDefaults(default_publish=True, default_discount=50))

        sent = [call.args[0] for call in create.await_args_list]
        assert all(p.publish for p in sent)
        assert all(p.discount_price == pytest.approx(50.0) for p in sent)
        # Mapped rows keep their own values
        assert all(p.discount_price == 0.0 for p in session.mapped_rows)

    @pytest.mark.asyncio
    async def test_rerun_after_completion(self):
        session = _loaded_session(3)
        create = AsyncMock(side_effect=lambda p: {"wSKU": p.primary_sku})

        await run_import(session, create)
        await run_import(session, create)

        assert create.await_count == 6
        assert session.imported_count == 3
