"""JSON encoding and decoding for request and response bodies."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

import pydantic_core
from pydantic import TypeAdapter, ValidationError

from .errors import DecodingError, EncodingError

T = TypeVar("T")


class JsonEncoder(Protocol):
    """Anything that turns an object into JSON bytes."""

    def encode(self, obj: Any) -> bytes: ...


class JsonDecoder(Protocol):
    """Anything that turns JSON bytes into an instance of a type."""

    def decode(self, data: bytes, type_: type[T]) -> T: ...


class JsonCodec:
    """
    Default JSON codec backed by pydantic.

    Encodes pydantic models, dataclasses, mappings, sequences and
    primitives. Decodes into any type pydantic can validate, including
    ``dict``, ``list[int]``, dataclasses and BaseModel subclasses.

    Example:
        codec = JsonCodec()
        data = codec.encode({"id": 1})
        user = codec.decode(b'{"id": 1, "name": "Ann"}', User)
    """

    def __init__(self, by_alias: bool = True, exclude_none: bool = False) -> None:
        """
        Initialize the codec.

        Args:
            by_alias: Serialize pydantic model fields by their alias
            exclude_none: Drop fields whose value is None when encoding
        """
        self.by_alias = by_alias
        self.exclude_none = exclude_none

    def encode(self, obj: Any) -> bytes:
        """
        Serialize obj to JSON bytes.

        Raises:
            EncodingError: If obj contains values that cannot be serialized
        """
        try:
            return pydantic_core.to_json(obj, by_alias=self.by_alias, exclude_none=self.exclude_none)
        except (pydantic_core.PydanticSerializationError, TypeError, ValueError) as err:
            raise EncodingError(str(err)) from err

    def decode(self, data: bytes, type_: type[T]) -> T:
        """
        Parse JSON bytes and validate them as type_.

        Raises:
            DecodingError: If data is not valid JSON or does not match type_
        """
        try:
            return TypeAdapter(type_).validate_json(data)
        except ValidationError as err:
            raise DecodingError(str(err)) from err
