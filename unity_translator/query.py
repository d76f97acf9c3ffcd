"""Search and progress statistics over extracted terms."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TranslationStats:
    total: int             # Extracted terms
    translated: int        # Terms with a non-blank translation
    with_data_line: int    # Terms that can actually be written back

    @property
    def untranslated(self) -> int:
        return self.total - self.translated

    @property
    def percent(self) -> int:
        if not self.total:
            return 0
        return self.translated * 100 // self.total


def filter_terms(terms: list, query: str) -> list:
    """Return terms whose key or original text contains ``query`` (any case).

    An empty query returns ``terms`` itself.
    """
    if not query:
        return terms
    q = query.lower()
    return [t for t in terms if q in t.term.lower() or q in t.original_text.lower()]


def is_translated(term: str, translation_map: dict) -> bool:
    value = translation_map.get(term)
    return value is not None and bool(value.strip())


def count_translated(terms: list, translation_map: dict) -> int:
    """Count terms mapped to a non-blank translation."""
    return sum(1 for t in terms if is_translated(t.term, translation_map))


def translation_stats(terms: list, translation_map: dict) -> TranslationStats:
    return TranslationStats(
        total=len(terms),
        translated=count_translated(terms, translation_map),
        with_data_line=sum(1 for t in terms if t.data_line_index is not None),
    )
