"""Decoder for the compact word-variant encoding.

The external pipeline ships word data per sheet as::

    {"manuscripts": ["M1", "M2"],
     "words": [{"l": "et", "b": "a", "v": [null, ["y", "a"]]}]}

Positions in ``v`` align with ``manuscripts``. ``null`` means the reading
is identical to the reference form; otherwise it is a ``[text, code]``
pair whose code is looked up in ``KIND_CODES``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from psalter.config import IDENTICAL_SENTINEL, KIND_CODES
from psalter.variants.models import (
    IDENTICAL_VARIANT,
    Variant,
    VariantKind,
    WordEntry,
)

logger = logging.getLogger(__name__)

_KIND_BY_CODE = {code: VariantKind(kind) for code, kind in KIND_CODES.items()}


class CodecError(ValueError):
    """Raised when compact word data violates the wire contract."""

    def __init__(self, message: str, sheet: str | None = None, index: int | None = None):
        self.sheet = sheet
        self.index = index
        where = ""
        if sheet is not None:
            where = f"[{sheet}]" if index is None else f"[{sheet}#{index}]"
        super().__init__(f"{where} {message}" if where else message)


def decode_kind(code: Any) -> VariantKind:
    """Map a kind code to its VariantKind; unrecognized codes become UNKNOWN."""
    kind = _KIND_BY_CODE.get(code)
    if kind is None:
        logger.debug(f"Unrecognized kind code {code!r}, treating as unknown")
        return VariantKind.UNKNOWN
    return kind


def _decode_position(position: Any, sheet: str, index: int) -> Variant:
    if position is None:
        return IDENTICAL_VARIANT
    if not isinstance(position, (list, tuple)) or len(position) != 2:
        raise CodecError(
            f"Variant position must be null or [text, code], got {position!r}",
            sheet,
            index,
        )
    text, code = position
    # The sentinel always means "same as reference", whatever the code says.
    if text == IDENTICAL_SENTINEL:
        return IDENTICAL_VARIANT
    return Variant(text="" if text is None else str(text), kind=decode_kind(code))


def decode_sheet(name: str, sheet: Mapping[str, Any]) -> list[WordEntry]:
    """Decode one sheet of compact word records, preserving word order."""
    if not isinstance(sheet, Mapping):
        raise CodecError("Sheet must be a mapping", name)
    for key in ("manuscripts", "words"):
        if key not in sheet:
            raise CodecError(f"Missing required field: {key}", name)

    if not isinstance(sheet["manuscripts"], list) or not isinstance(sheet["words"], list):
        raise CodecError("manuscripts and words must be lists", name)

    manuscripts = list(sheet["manuscripts"])
    if not all(isinstance(ms, str) for ms in manuscripts):
        raise CodecError("Manuscript abbreviations must be strings", name)
    duplicates = sorted({ms for ms in manuscripts if manuscripts.count(ms) > 1})
    if duplicates:
        raise CodecError(f"Duplicate manuscript: {', '.join(duplicates)}", name)
    entries = []

    for index, word in enumerate(sheet["words"]):
        if not isinstance(word, Mapping):
            raise CodecError("Word record must be a mapping", name, index)
        for key in ("l", "b", "v"):
            if key not in word:
                raise CodecError(f"Missing required field: {key}", name, index)

        positions = word["v"]
        if not isinstance(positions, list):
            raise CodecError("Field v must be a list", name, index)
        if len(positions) > len(manuscripts):
            raise CodecError(
                f"Position {len(manuscripts)} has no corresponding manuscript "
                f"({len(positions)} positions, {len(manuscripts)} manuscripts)",
                name,
                index,
            )
        if len(positions) < len(manuscripts):
            raise CodecError(
                f"Missing readings for {', '.join(manuscripts[len(positions):])}",
                name,
                index,
            )

        variants = {
            ms: _decode_position(position, name, index)
            for ms, position in zip(manuscripts, positions)
        }
        entries.append(
            WordEntry(latin=word["l"], reference_form=word["b"], variants=variants)
        )

    return entries


def decode_compact(data: Mapping[str, Any]) -> dict[str, list[WordEntry]]:
    """Decode every sheet of a compact encoding, preserving sheet order."""
    if not isinstance(data, Mapping):
        raise CodecError(f"Compact data must be a mapping, got {type(data).__name__}")
    return {name: decode_sheet(name, sheet) for name, sheet in data.items()}


def get_manuscripts(data: Mapping[str, Any], sheet: str) -> list[str]:
    """Manuscripts declared for a sheet, in declared order ([] if absent)."""
    entry = data.get(sheet)
    if not entry:
        return []
    return list(entry.get("manuscripts", []))
