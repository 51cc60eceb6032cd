"""Tests for the Rich renderers."""

from bson import ObjectId

from mongochan.domain.types import NOT_FOUND, WriteStatus
from mongochan.output.renderers import render_quiet, render_result
from mongochan.services.result import CommandError, CommandResult

# ── Helpers ───────────────────────────────────────────────────────────


def _ok(op: str, value: object) -> CommandResult:
    return CommandResult(ok=True, op=op, value=value)


def _err(op: str, code: str, message: str, **detail: object) -> CommandResult:
    return CommandResult(
        ok=False,
        op=op,
        error=CommandError(code=code, message=message, detail=dict(detail)),
    )


# ── Error rendering ──────────────────────────────────────────────────


class TestErrorRenderer:
    def test_basic_error(self) -> None:
        output = render_result(_err("fetch", "ConnectionError", "connection refused"))
        assert "ERROR" in output
        assert "fetch" in output
        assert "connection refused" in output
        assert "ConnectionError" not in output

    def test_verbose_shows_detail(self) -> None:
        result = _err("remove", "AutoReconnect", "Bad", collection="users")
        output = render_result(result, verbose=True)
        assert "AutoReconnect" in output
        assert "collection: users" in output

    def test_message_with_brackets_not_treated_as_markup(self) -> None:
        output = render_result(_err("fetch", "X", "unknown operator [$foo]"))
        assert "[$foo]" in output

    def test_no_error_object(self) -> None:
        output = render_result(CommandResult(ok=False, op="fetch"))
        assert "Unknown error" in output


# ── Value shapes ─────────────────────────────────────────────────────


class TestValueRenderer:
    def test_documents_table(self) -> None:
        docs = [{"name": "John", "age": 40}, {"name": "Jane", "tags": ["a"]}]
        output = render_result(_ok("fetch", docs))
        assert output.startswith("OK")
        for text in ("name", "age", "tags", "John", "Jane", "40", '["a"]', "2 documents"):
            assert text in output

    def test_max_rows(self) -> None:
        docs = [{"n": i} for i in range(5)]
        output = render_result(_ok("fetch", docs), max_rows=2)
        assert "5 documents (2 shown)" in output

    def test_empty_list(self) -> None:
        assert "0 documents" in render_result(_ok("fetch", []))

    def test_single_document(self) -> None:
        oid = ObjectId()
        output = render_result(_ok("insert", {"_id": oid, "name": "John"}))
        assert f"_id: {oid}" in output
        assert "name: John" in output

    def test_not_found(self) -> None:
        output = render_result(_ok("fetch_one", NOT_FOUND))
        assert "OK" in output
        assert "no matching document" in output

    def test_write_status(self) -> None:
        status = WriteStatus(acknowledged=True, matched_count=0, modified_count=0, upserted_id=7)
        output = render_result(_ok("replace_one", status))
        assert "matched_count: 0" in output
        assert "upserted_id: 7" in output

    def test_scalar(self) -> None:
        assert "value: 3" in render_result(_ok("fetch_count", 3))

    def test_verbose_meta(self) -> None:
        result = CommandResult(
            ok=True,
            op="fetch",
            value=1,
            meta={"telemetry": {"name": "fetch", "duration_ms": 1.5}},
        )
        output = render_result(result, verbose=True)
        assert "meta:" in output
        assert "1.50ms" in output


# ── Quiet mode ───────────────────────────────────────────────────────


class TestQuietRenderer:
    def test_document_ids(self) -> None:
        docs = [{"_id": 1, "name": "a"}, {"_id": 2, "name": "b"}, {"name": "no-id"}]
        assert render_quiet(_ok("fetch", docs)) == "1\n2"

    def test_single_document_id(self) -> None:
        assert render_quiet(_ok("insert", {"_id": "u1"})) == "u1"

    def test_scalars(self) -> None:
        assert render_quiet(_ok("fetch_count", 4)) == "4"
        assert render_quiet(_ok("drop_collection", "users")) == "users"

    def test_fallback(self) -> None:
        assert render_quiet(_ok("fetch_one", NOT_FOUND)) == "OK: fetch_one"

    def test_error(self) -> None:
        output = render_quiet(_err("fetch", "X", "boom"))
        assert output.startswith("ERROR: fetch")
        assert "boom" in output
