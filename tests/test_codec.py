"""Tests for the pydantic-backed JSON codec."""

import json
from dataclasses import dataclass
from datetime import date
from typing import Optional

import pytest
from fluent_http import DecodingError, EncodingError, JsonCodec
from pydantic import BaseModel, Field


class Account(BaseModel):
    account_id: int = Field(alias="accountId")
    nickname: Optional[str] = None


@dataclass
class Point:
    x: int
    y: int


class TestJsonCodecEncode:
    """Tests for JsonCodec.encode."""

    def test_encode_dict(self):
        """Test encoding a plain mapping."""
        assert json.loads(JsonCodec().encode({"a": [1, 2], "b": None})) == {"a": [1, 2], "b": None}

    def test_encode_dataclass(self):
        """Test encoding a dataclass."""
        assert json.loads(JsonCodec().encode(Point(1, 2))) == {"x": 1, "y": 2}

    def test_encode_model_by_alias(self):
        """Test that pydantic models use field aliases."""
        account = Account(accountId=7)
        assert json.loads(JsonCodec().encode(account)) == {"accountId": 7, "nickname": None}

    def test_encode_exclude_none(self):
        """Test dropping None values."""
        account = Account(accountId=7)
        assert json.loads(JsonCodec(exclude_none=True).encode(account)) == {"accountId": 7}

    def test_encode_date(self):
        """Test that dates serialize to ISO strings."""
        assert JsonCodec().encode({"day": date(2024, 1, 31)}) == b'{"day":"2024-01-31"}'

    def test_encode_unserializable(self):
        """Test that unknown types raise EncodingError."""
        with pytest.raises(EncodingError):
            JsonCodec().encode({"handle": object()})


class TestJsonCodecDecode:
    """Tests for JsonCodec.decode."""

    def test_decode_model(self):
        """Test decoding into a model using aliases."""
        account = JsonCodec().decode(b'{"accountId": 3, "nickname": "main"}', Account)
        assert account.account_id == 3
        assert account.nickname == "main"

    def test_decode_generic(self):
        """Test decoding into a parametrized generic."""
        assert JsonCodec().decode(b"[1, 2, 3]", list[int]) == [1, 2, 3]

    def test_decode_dataclass(self):
        """Test decoding into a dataclass."""
        assert JsonCodec().decode(b'{"x": 1, "y": 2}', Point) == Point(1, 2)

    def test_decode_malformed(self):
        """Test that malformed JSON raises DecodingError."""
        with pytest.raises(DecodingError):
            JsonCodec().decode(b"{", dict)

    def test_decode_wrong_shape(self):
        """Test that mismatched data raises DecodingError."""
        with pytest.raises(DecodingError):
            JsonCodec().decode(b'{"x": "left"}', Point)
