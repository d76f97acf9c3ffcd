"""Editing session: one localization file, its terms and the imported translations."""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from .errors import EmptyInputError, LocalizationError, NoTranslationsFoundError
from .exporters import export_csv, export_json, export_pairs
from .project_model import Document
from .query import filter_terms, translation_stats
from .text_processor import parse_translation_file, strip_bom
from .unity_text import (
    CHUNK_SIZE, SUFFIX_REVERSED, SUFFIX_TERMS, SUFFIX_TRANSLATED,
    apply_reversed_translations, apply_translations, extract_terms,
    load_document, output_file_name, read_text_file, validate_language_slot,
    write_text_file,
)

log = logging.getLogger(__name__)

# format -> (file suffix, extension override)
EXPORT_FORMATS = {
    "pairs": (SUFFIX_TERMS, None),
    "json": (SUFFIX_TERMS, ".json"),
    "csv": (SUFFIX_TERMS, ".csv"),
}


@dataclass
class LocalizationProject:
    """Holds the single document being edited and everything derived from it.

    Every stage validates its input fully before assigning anything, so a
    failed open, re-extraction or import leaves the previous state as it was.
    """
    file_name: str = ""
    document: Optional[Document] = None
    language_slot: int = 0
    terms: list = field(default_factory=list)
    translations: dict = field(default_factory=dict)   # term -> prepared translation
    chunk_size: int = CHUNK_SIZE

    @property
    def has_document(self) -> bool:
        return self.document is not None

    @property
    def no_terms_found(self) -> bool:
        """True when the loaded document yielded no terms for the current slot."""
        return self.document is not None and not self.terms

    @property
    def total(self) -> int:
        return len(self.terms)

    @property
    def translated_count(self) -> int:
        return self.stats().translated

    def stats(self):
        return translation_stats(self.terms, self.translations)

    def search(self, query: str) -> list:
        return filter_terms(self.terms, query)

    # ── Loading and extraction ────────────────────────────────────

    def open_file(self, path: str, language_slot: Optional[int] = None,
                  on_progress=None, cancel_token=None) -> list:
        """Read, validate and extract a localization file from disk."""
        text = read_text_file(path)
        return self.load_text(text, os.path.basename(path), language_slot,
                              on_progress=on_progress, cancel_token=cancel_token)

    def load_text(self, text: str, file_name: str = "",
                  language_slot: Optional[int] = None,
                  on_progress=None, cancel_token=None) -> list:
        """Validate dump text, extract its terms and make it the current document."""
        slot = self.language_slot if language_slot is None else language_slot
        validate_language_slot(slot)
        document = load_document(text)
        terms = extract_terms(document, slot, on_progress=on_progress,
                              cancel_token=cancel_token, chunk_size=self.chunk_size)
        self.commit_document(file_name, document, slot, terms)
        return terms

    def commit_document(self, file_name: str, document: Document,
                        language_slot: int, terms: list):
        """Replace the current document wholesale (translations are cleared)."""
        self.file_name = file_name
        self.document = document
        self.language_slot = language_slot
        self.terms = terms
        self.translations = {}
        log.info("Loaded %s: %d lines, %d terms (slot %d)",
                 file_name or "<text>", len(document), len(terms), language_slot)

    def reextract(self, language_slot: int, on_progress=None, cancel_token=None) -> list:
        """Extract again for a different language slot."""
        validate_language_slot(language_slot)
        if self.document is None:
            self.language_slot = language_slot
            return self.terms
        terms = extract_terms(self.document, language_slot, on_progress=on_progress,
                              cancel_token=cancel_token, chunk_size=self.chunk_size)
        self.commit_terms(language_slot, terms)
        return terms

    def commit_terms(self, language_slot: int, terms: list):
        self.language_slot = language_slot
        self.terms = terms

    # ── Translations ──────────────────────────────────────────────

    def import_translations(self, content: str) -> int:
        """Parse a translation file and make it the current translation map.

        Returns:
            Number of data lines the new translations will replace.

        Raises:
            EmptyInputError: content is empty or whitespace only.
            NoTranslationsFoundError: no block held a term and a translation.
        """
        content = strip_bom(content)
        if not content or not content.strip():
            raise EmptyInputError("The translation file is empty.")
        translation_map = parse_translation_file(content)
        if not translation_map:
            raise NoTranslationsFoundError(
                "No valid translations found. Each block needs the term on "
                "one line and its translation on the next."
            )
        self.translations = translation_map
        return self.applicable_count()

    def import_translation_file(self, path: str) -> int:
        return self.import_translations(read_text_file(path))

    def applicable_count(self) -> int:
        """Terms that have both a translation and a data line to write it to."""
        return sum(1 for t in self.terms
                   if t.data_line_index is not None and t.term in self.translations)

    # ── Output ────────────────────────────────────────────────────

    def _require_document(self) -> Document:
        if self.document is None:
            raise EmptyInputError("No localization file is loaded.")
        return self.document

    def translated_document(self, reverse: bool = False) -> tuple:
        """Return (new Document with translations written in, lines replaced)."""
        document = self._require_document()
        apply = apply_reversed_translations if reverse else apply_translations
        return apply(document, self.terms, self.translations)

    def output_name(self, reverse: bool = False) -> str:
        return output_file_name(self.file_name,
                                SUFFIX_REVERSED if reverse else SUFFIX_TRANSLATED)

    def save_translated(self, path: str, reverse: bool = False) -> int:
        """Write the translated (or reversed) file and return lines replaced."""
        document, applied = self.translated_document(reverse)
        write_text_file(path, document.to_text())
        log.info("Saved %s (%d lines replaced)", path, applied)
        return applied

    def export_terms(self, fmt: str = "pairs") -> str:
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unknown export format {fmt!r}")
        if not self.terms:
            raise LocalizationError("There are no extracted terms to export.")
        if fmt == "json":
            return export_json(self.terms)
        if fmt == "csv":
            return export_csv(self.terms, self.translations)
        return export_pairs(self.terms)

    def export_name(self, fmt: str = "pairs") -> str:
        suffix, extension = EXPORT_FORMATS[fmt]
        return output_file_name(self.file_name, suffix, extension)

    def save_export(self, path: str, fmt: str = "pairs") -> int:
        """Write an export file and return the number of terms in it."""
        write_text_file(path, self.export_terms(fmt))
        log.info("Exported %d terms to %s (%s)", len(self.terms), path, fmt)
        return len(self.terms)
