"""
Typed JSON decoding and encoding of payloads.

A response model is any type pydantic can validate: a BaseModel subclass,
a builtin container such as ``List[int]``, or None for plain JSON values.
"""

from functools import lru_cache
from typing import Any, Optional

from pydantic import TypeAdapter


@lru_cache(maxsize=128)
def _adapter(response_model: Any) -> TypeAdapter:
    return TypeAdapter(Any if response_model is None else response_model)


def decode(data: bytes, response_model: Optional[Any] = None) -> Any:
    """
    Decode JSON bytes into response_model.

    Raises:
        pydantic.ValidationError: If data is not valid JSON for the model
    """
    return _adapter(response_model).validate_json(data)


def encode(value: Any, response_model: Optional[Any] = None) -> bytes:
    """Encode a decoded value back to JSON bytes that decode() accepts."""
    return _adapter(response_model).dump_json(value, by_alias=True)
