"""Variants module: decoding and representation of word variants.

Key concepts:
- WordEntry: one Latin lemma with a reading per manuscript of its sheet
- Variant: a manuscript reading and its classification
- VariantKind: identical, autosemantic, synsemantic or unknown

Word data arrives in a compact positional encoding; see codec.py.
"""

from psalter.variants.models import (
    IDENTICAL_VARIANT,
    Variant,
    VariantKind,
    WordEntry,
)
from psalter.variants.codec import (
    CodecError,
    decode_compact,
    decode_kind,
    decode_sheet,
    get_manuscripts,
)

__all__ = [
    # Models
    "VariantKind",
    "Variant",
    "WordEntry",
    "IDENTICAL_VARIANT",
    # Codec
    "CodecError",
    "decode_compact",
    "decode_kind",
    "decode_sheet",
    "get_manuscripts",
]
