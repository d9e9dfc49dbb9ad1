"""Verse-by-verse comparison against the older Czech psalters."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from psalter.ingest.resources import VerseTranslation


@dataclass(frozen=True)
class OlderPsalter:
    """Catalog entry for an older psalter, bible or early print."""

    abbreviation: str
    name: str
    period: str
    type: str  # older, bible, print

    def to_dict(self) -> dict:
        return {
            "abbreviation": self.abbreviation,
            "name": self.name,
            "period": self.period,
            "type": self.type,
        }


OLDER_PSALTERS = {
    p.abbreviation: p
    for p in (
        OlderPsalter("Witt", "Žaltář wittenberský", "14. stol.", "older"),
        OlderPsalter("Klem", "Žaltář klementinský", "14. stol.", "older"),
        OlderPsalter("Kap", "Žaltář kapitulní", "14. stol.", "older"),
        OlderPsalter("Poděbr", "Žaltář poděbradský", "15. stol.", "older"),
        OlderPsalter("Bosk", "Bible boskovická", "1415-1430", "bible"),
        OlderPsalter("Pad", "Bible padeřovská", "1430-1435", "bible"),
        OlderPsalter("PTZ", "První tištěný žaltář", "1487", "print"),
        OlderPsalter("Bak", "Žaltář Bakalářův", "1504", "print"),
    )
}

DEFAULT_PSALTERS = ["Witt", "Klem", "Poděbr", "PTZ"]

_VERSE_NUMBER = re.compile(r",\s*(\d+)")


def sort_verse_ids(verse_ids: Iterable[str]) -> list[str]:
    """Order identifiers like "Ps 6,2" by verse number; unnumbered ones last."""

    def key(verse_id: str) -> tuple[int, int]:
        match = _VERSE_NUMBER.search(verse_id)
        if match is None:
            return (1, 0)
        return (0, int(match.group(1)))

    return sorted(verse_ids, key=key)


@dataclass
class VerseComparison:
    """Latin verse with the selected psalters' translations."""

    verse_id: str
    latin: str
    translations: list[dict]

    def to_dict(self) -> dict:
        return {
            "verse_id": self.verse_id,
            "latin": self.latin,
            "translations": self.translations,
        }


def verse_comparison(
    verses: Mapping[str, VerseTranslation],
    verse_id: str,
    psalters: Sequence[str] | None = None,
) -> VerseComparison:
    """Translations of one verse in the selected psalters' order.

    Psalters without a translation of the verse are skipped. Raises
    KeyError for an unknown verse.
    """
    verse = verses[verse_id]
    selected = DEFAULT_PSALTERS if psalters is None else psalters

    translations = []
    for abbr in selected:
        text = verse.translations.get(abbr)
        if not text:
            continue
        info = OLDER_PSALTERS.get(abbr)
        entry = info.to_dict() if info else {"abbreviation": abbr}
        entry["text"] = text
        translations.append(entry)

    return VerseComparison(verse_id=verse_id, latin=verse.latin, translations=translations)
