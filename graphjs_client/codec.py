"""Lenient decoding of backend payloads into record models.

The backend sometimes elides fields from individual entries, so collection
helpers skip the entries that fail validation instead of failing the whole
payload. Single objects that fail decode to ``None``.
"""
from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any, Optional, TypeVar
from urllib.parse import urlsplit

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

BIRTHDAY_FORMAT = "%m/%d/%Y"

ModelT = TypeVar("ModelT", bound=BaseModel)


class DecodeError(ValueError):
    pass


def _from_epoch_millis(millis: int) -> datetime:
    return datetime.fromtimestamp(millis / 1000.0, tz=timezone.utc)


def coerce_date(value: Any) -> datetime:
    """Accepts epoch millis (as a numeric string or a JSON integer) or ``MM/dd/yyyy``."""
    if isinstance(value, datetime):
        return value

    if isinstance(value, str):
        text = value.strip()
        try:
            return _from_epoch_millis(int(text))
        except (ValueError, OverflowError, OSError):
            pass
        try:
            return datetime.strptime(text, BIRTHDAY_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError:
            raise DecodeError(f"Couldn't parse date: {value!r}") from None

    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return _from_epoch_millis(value)
        except (OverflowError, OSError, ValueError) as exc:
            raise DecodeError(f"Couldn't parse date: {value!r}") from exc

    raise DecodeError(f"Couldn't parse date: {value!r}")


def coerce_uri(value: Any) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"Couldn't parse uri: {value!r}")
    try:
        urlsplit(value)
    except ValueError as exc:
        raise DecodeError(f"Couldn't parse uri: {value!r}") from exc
    return value


def format_birthday(value: datetime) -> str:
    return value.strftime(BIRTHDAY_FORMAT)


def _validate(model: type[ModelT], data: Any) -> ModelT:
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")
    return model.model_validate(data)


def parse_safe(model: type[ModelT], data: Any) -> Optional[ModelT]:
    if data is None:
        return None
    try:
        return _validate(model, data)
    except (ValidationError, DecodeError) as exc:
        logger.warning("Cannot parse %r to %s because %s", data, model.__name__, exc)
        return None


def parse_map_safe(model: type[ModelT], data: Any) -> dict[str, ModelT]:
    result: dict[str, ModelT] = {}
    if not isinstance(data, dict):
        return result

    for key, entry in data.items():
        try:
            result[str(key)] = _validate(model, entry)
        except (ValidationError, DecodeError) as exc:
            logger.warning("Skipping entry %r of %s because %s", key, model.__name__, exc)
    return result


def parse_array_safe(model: type[ModelT], data: Any) -> list[ModelT]:
    result: list[ModelT] = []
    if not isinstance(data, list):
        return result

    for index, entry in enumerate(data):
        try:
            result.append(_validate(model, entry))
        except (ValidationError, DecodeError) as exc:
            logger.warning("Skipping item %d of %s because %s", index, model.__name__, exc)
    return result


def parse_string_list(data: Any) -> list[str]:
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, str)]


def parse_keyed_entries(model: type[ModelT], data: Any) -> dict[str, ModelT]:
    """Flatten ``[{id: {...}}, {id: {...}}]`` into an ordered ``{id: model}`` map."""
    result: dict[str, ModelT] = {}
    if not isinstance(data, list):
        return result

    for entry in data:
        if not isinstance(entry, dict):
            logger.warning("Skipping non-object entry %r of %s", entry, model.__name__)
            continue
        result.update(parse_map_safe(model, entry))
    return result
