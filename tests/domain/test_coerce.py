"""Tests for native/wire coercion."""

from __future__ import annotations

import datetime as dt
from types import SimpleNamespace
from typing import Any

import pytest
from bson import Binary, ObjectId
from bson.son import SON

from mongochan.domain.coerce import (
    decode_deleted_count,
    decode_write_status,
    from_wire,
    to_wire,
    to_wire_document,
    to_wire_documents,
)
from mongochan.domain.types import SortDirection, WriteStatus
from mongochan.errors import DocumentShapeError, ValidationError


class TestToWire:
    def test_none(self) -> None:
        assert to_wire(None) is None

    def test_mapping_becomes_son_with_string_keys(self) -> None:
        doc = to_wire({"name": "John", 3: "three", SortDirection.ASC: 1})
        assert isinstance(doc, SON)
        assert list(doc.keys()) == ["name", "3", "asc"]

    def test_key_order_preserved_at_every_level(self) -> None:
        doc = to_wire({"z": 1, "a": {"y": 2, "b": 3}, "m": [{"k": 1, "c": 2}]})
        assert list(doc) == ["z", "a", "m"]
        assert list(doc["a"]) == ["y", "b"]
        assert list(doc["m"][0]) == ["k", "c"]
        assert isinstance(doc["a"], SON)
        assert isinstance(doc["m"][0], SON)

    def test_sequences_become_lists(self) -> None:
        assert to_wire((1, (2, 3), [4])) == [1, [2, 3], [4]]

    def test_strings_and_bytes_are_scalars(self) -> None:
        assert to_wire("abc") == "abc"
        assert to_wire(b"abc") == b"abc"

    def test_driver_scalars_pass_through_by_identity(self) -> None:
        oid = ObjectId()
        when = dt.datetime(2024, 1, 2, tzinfo=dt.UTC)
        blob = Binary(b"\x00\x01")
        doc = to_wire({"_id": oid, "when": when, "blob": blob})
        assert doc["_id"] is oid
        assert doc["when"] is when
        assert doc["blob"] is blob


class TestFromWire:
    def test_none(self) -> None:
        assert from_wire(None) is None

    def test_document_becomes_dict(self) -> None:
        native = from_wire(SON([("b", 1), ("a", SON([("c", [SON([("d", None)])])]))]))
        assert native == {"b": 1, "a": {"c": [{"d": None}]}}
        assert type(native) is dict
        assert type(native["a"]) is dict
        assert type(native["a"]["c"][0]) is dict
        assert list(native) == ["b", "a"]

    def test_plain_dict_from_driver(self) -> None:
        assert from_wire({"x": [1, {"y": 2}]}) == {"x": [1, {"y": 2}]}

    def test_scalars_pass_through_by_identity(self) -> None:
        oid = ObjectId()
        assert from_wire(oid) is oid
        assert from_wire(3.5) == 3.5


class TestRoundTrip:
    @pytest.mark.parametrize(
        "value",
        [
            None,
            42,
            "text",
            True,
            {},
            [],
            {"name": "John", "age": 40, "tags": ["a", "b"], "address": {"zip": None}},
            [{"a": 1}, [2, [3]], None, "x"],
        ],
    )
    def test_from_wire_inverts_to_wire(self, value: Any) -> None:
        assert from_wire(to_wire(value)) == value

    def test_tuples_normalize_to_lists(self) -> None:
        assert from_wire(to_wire({"t": (1, 2)})) == {"t": [1, 2]}

    def test_non_string_keys_normalize_to_strings(self) -> None:
        assert from_wire(to_wire({1: "one"})) == {"1": "one"}


class TestShapeChecks:
    def test_document_requires_mapping(self) -> None:
        with pytest.raises(DocumentShapeError) as exc_info:
            to_wire_document(["not", "a", "doc"], what="insert")
        assert exc_info.value.value == ["not", "a", "doc"]
        assert "insert" in str(exc_info.value)

    def test_shape_error_is_a_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            to_wire_document("nope")

    def test_documents_requires_sequence_of_mappings(self) -> None:
        assert to_wire_documents([{"a": 1}, {"b": 2}]) == [{"a": 1}, {"b": 2}]
        with pytest.raises(DocumentShapeError):
            to_wire_documents({"a": 1})
        with pytest.raises(DocumentShapeError):
            to_wire_documents([{"a": 1}, 2])
        with pytest.raises(DocumentShapeError):
            to_wire_documents("abc")

    def test_documents_must_not_be_empty(self) -> None:
        with pytest.raises(DocumentShapeError, match="non-empty"):
            to_wire_documents([])
        with pytest.raises(DocumentShapeError):
            to_wire_documents(())


class TestWriteStatus:
    def test_acknowledged_upsert(self) -> None:
        oid = ObjectId()
        raw = SimpleNamespace(acknowledged=True, matched_count=0, modified_count=0, upserted_id=oid)
        status = decode_write_status(raw)
        assert status == WriteStatus(
            acknowledged=True, matched_count=0, modified_count=0, upserted_id=oid
        )

    def test_acknowledged_update(self) -> None:
        raw = SimpleNamespace(acknowledged=True, matched_count=1, modified_count=1, upserted_id=None)
        status = decode_write_status(raw)
        assert status.matched_count == 1
        assert status.modified_count == 1
        assert status.upserted_id is None

    def test_unacknowledged_reports_all_absent(self) -> None:
        class Unacknowledged:
            acknowledged = False

            @property
            def matched_count(self) -> int:
                raise RuntimeError("unacknowledged write")

        status = decode_write_status(Unacknowledged())
        assert status == WriteStatus(acknowledged=False)
        assert status.matched_count is None
        assert status.modified_count is None
        assert status.upserted_id is None

    def test_missing_result(self) -> None:
        assert decode_write_status(None).acknowledged is False


class TestDeletedCount:
    def test_acknowledged(self) -> None:
        assert decode_deleted_count(SimpleNamespace(acknowledged=True, deleted_count=2)) == 2

    def test_unacknowledged(self) -> None:
        assert decode_deleted_count(SimpleNamespace(acknowledged=False)) is None
