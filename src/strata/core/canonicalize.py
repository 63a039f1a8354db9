"""Canonical JSON serialization for cached entities.

The cache holds an opaque byte string. Writers always store the
field-complete JSON form of a model; readers always validate it back into
the model class, so no untyped structure ever leaves the cache layer.
"""

from __future__ import annotations

from typing import TypeVar

import orjson
from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)

ORJSON_OPTIONS = orjson.OPT_NON_STR_KEYS | orjson.OPT_SORT_KEYS


def canonical_bytes_from_model(model: BaseModel) -> bytes:
    """Serialize a model to canonical JSON bytes (camelCase, all fields)."""
    payload = model.model_dump(mode="json", by_alias=True)
    return orjson.dumps(payload, option=ORJSON_OPTIONS)


def model_from_bytes(model_cls: type[ModelT], data: bytes | str) -> ModelT:
    """Validate cached bytes back into ``model_cls``.

    Raises pydantic.ValidationError for payloads that do not match.
    """
    return model_cls.model_validate_json(data)
