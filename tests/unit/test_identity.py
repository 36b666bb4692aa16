"""Unit tests for deterministic point identity."""

from __future__ import annotations

import uuid

import pytest

from src.models.rag import Document
from src.services.ingestion.identity import (
    POINT_ID_NAMESPACE,
    build_chunks,
    build_points,
    display_uid,
    point_id,
)

_URL = "https://news.example.com/2024/ai-act"


class TestPointId:
    def test_same_inputs_same_id(self) -> None:
        assert point_id(_URL, 3) == point_id(_URL, 3)

    def test_different_index_different_id(self) -> None:
        ids = {point_id(_URL, i) for i in range(50)}
        assert len(ids) == 50

    def test_different_url_different_id(self) -> None:
        assert point_id(_URL, 0) != point_id(_URL + "?page=2", 0)

    def test_is_name_based_uuid(self) -> None:
        value = uuid.UUID(point_id(_URL, 0))
        assert value.version == 5
        assert value == uuid.uuid5(uuid.NAMESPACE_DNS, f"{_URL}-0")
        assert POINT_ID_NAMESPACE == uuid.NAMESPACE_DNS

    def test_rejects_negative_index(self) -> None:
        with pytest.raises(ValueError):
            point_id(_URL, -1)


class TestDisplayUid:
    def test_is_one_based(self) -> None:
        assert display_uid(_URL, 0) == f"{_URL}-1"

    def test_is_not_the_storage_key(self) -> None:
        assert display_uid(_URL, 0) != point_id(_URL, 0)


class TestBuildPoints:
    def test_builds_payloads_in_order(self) -> None:
        document = Document(url=_URL, title="EU passes AI Act")
        chunks = build_chunks(_URL, ["first chunk", "second chunk"])
        vectors = [[0.1, 0.2], [0.3, 0.4]]

        points = build_points(document, chunks, vectors)

        assert [p.payload.chunk_index for p in points] == [0, 1]
        assert [p.payload.chunk_text for p in points] == ["first chunk", "second chunk"]
        assert points[0].id == point_id(_URL, 0)
        assert points[1].payload.uid == f"{_URL}-2"
        assert all(p.payload.title == "EU passes AI Act" for p in points)
        assert points[1].vector == [0.3, 0.4]

    def test_payload_uses_stored_key_names(self) -> None:
        document = Document(url=_URL, title="t")
        point = build_points(document, build_chunks(_URL, ["text"]), [[1.0]])[0]

        metadata = point.payload.to_metadata()
        assert metadata == {
            "sourceUrl": _URL,
            "title": "t",
            "chunkIndex": 0,
            "chunkText": "text",
            "uid": f"{_URL}-1",
        }

    def test_length_mismatch_raises(self) -> None:
        document = Document(url=_URL)
        with pytest.raises(ValueError, match="mismatch"):
            build_points(document, build_chunks(_URL, ["a", "b"]), [[1.0]])
