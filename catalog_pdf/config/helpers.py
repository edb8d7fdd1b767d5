"""Utility helpers shared by the snapshot loader."""

from __future__ import annotations

import datetime as dt
import typing as typ

from .models import SnapshotError

_TRUE_STRINGS = frozenset({"true", "yes", "1", "on"})
_FALSE_STRINGS = frozenset({"false", "no", "0", "off", ""})


def _pick(
    payload: typ.Mapping[str, typ.Any], *keys: str, default: typ.Any = None
) -> typ.Any:
    """Return the value of the first key present in ``payload``."""
    for key in keys:
        if key in payload:
            return payload[key]
    return default


def _optional_str(value: object | None) -> str | None:
    """Return ``value`` as trimmed text, mapping ``null`` and ``""`` to None.

    Use this for identifiers and references. Free-form copy goes through
    :func:`_verbatim_text` so its whitespace survives.
    """
    text = "" if value is None else str(value).strip()
    return text if text else None


def _verbatim_text(value: object | None) -> str:
    """Return descriptive copy exactly as stored, or ``""`` when it is blank."""
    if value is None:
        return ""
    text = str(value)
    return text if text.strip() else ""


def _require_str(value: object | None, *, field: str, context: str) -> str:
    """Return a non-empty string or raise :class:`SnapshotError`."""
    text = _optional_str(value)
    if text is None:
        msg = f"{context} is missing required field '{field}'."
        raise SnapshotError(msg)
    return text


def _coerce_bool(value: object, *, default: bool = False) -> bool:
    """Interpret YAML booleans and their common string spellings."""
    match value:
        case None:
            return default
        case bool():
            return value
        case int():
            return value != 0
        case str() as text:
            lowered = text.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
    msg = f"Cannot interpret {value!r} as a boolean."
    raise SnapshotError(msg)


def _coerce_int(value: object, *, field: str, context: str) -> int:
    """Return ``value`` as an int, rejecting booleans and non-numeric text."""
    if isinstance(value, bool):
        msg = f"{context} has a boolean '{field}'; expected an integer."
        raise SnapshotError(msg)
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"{context} has an invalid '{field}': {value!r}"
        raise SnapshotError(msg) from exc


def _coerce_price(value: object, *, context: str) -> float | None:
    """Return a numeric price, or None when the field is blank."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        msg = f"{context} has a boolean price."
        raise SnapshotError(msg)
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"{context} has an invalid price: {value!r}"
        raise SnapshotError(msg) from exc


def _coerce_status(value: object) -> typ.Literal["active", "inactive"]:
    """Normalize entity status values, treating anything unknown as active."""
    text = (_optional_str(value) or "active").lower()
    return "inactive" if text == "inactive" else "active"


def _parse_timestamp(value: object) -> dt.datetime | None:
    """Return a UTC datetime for a stored ``createdAt``/``updatedAt`` value.

    The catalog database exports timestamps in several shapes: ISO-8601
    strings (``Z`` suffix allowed), ``{"seconds": ..., "nanoseconds": ...}``
    mappings (``_seconds``/``_nanoseconds`` in older exports), epoch
    milliseconds, or native YAML dates. Naive values are taken as UTC.
    Anything unreadable yields None.
    """
    match value:
        case dt.datetime():
            parsed = value
        case dt.date():
            parsed = dt.datetime.combine(value, dt.time())
        case bool():
            return None
        case int() | float():
            return _from_epoch(value / 1000)
        case {"seconds": seconds, **rest} | {"_seconds": seconds, **rest}:
            nanos = rest.get("nanoseconds", rest.get("_nanoseconds")) or 0
            try:
                return _from_epoch(float(seconds) + float(nanos) / 1e9)
            except (TypeError, ValueError):
                return None
        case str() as text if text.strip():
            iso = text.strip()
            if iso.endswith("Z"):
                iso = iso[:-1] + "+00:00"
            try:
                parsed = dt.datetime.fromisoformat(iso)
            except ValueError:
                return None
        case _:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)


def _from_epoch(seconds: float) -> dt.datetime | None:
    try:
        return dt.datetime.fromtimestamp(seconds, tz=dt.UTC)
    except (OverflowError, OSError, ValueError):
        return None


__all__ = [
    "_coerce_bool",
    "_coerce_int",
    "_coerce_price",
    "_coerce_status",
    "_optional_str",
    "_parse_timestamp",
    "_pick",
    "_require_str",
    "_verbatim_text",
]
