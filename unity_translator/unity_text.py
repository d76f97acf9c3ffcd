"""Unity localization text dump parser and writer.

Handles extraction of translatable strings from the flat `Term` / `data`
text dumps produced by Unity asset exporters, and writing translations
back into the original lines without disturbing anything else.

A dump looks like::

     1 string Term = "Menu/Start"
     ...
      [0]
       1 string data = "Start Game"
      [1]
       1 string data = "Commencer"

Every `string Term` line opens a new entry; `[N]` markers select the
language slot that the following `string data` line belongs to.
"""

import logging
import os
import re
import threading
from typing import Callable, Iterator, Optional

from .errors import (
    EmptyInputError, ExtractionCancelled, MalformedInputError,
    OversizedInputError, ReadFailureError,
)
from .project_model import Document, ExtractedTerm
from .text_processor import reverse_for_display

log = logging.getLogger(__name__)

# Inputs larger than this are rejected before any parsing
MAX_INPUT_BYTES = 100 * 1024 * 1024

# Language slots are [0]..[12] in the exported Languages array
MAX_LANGUAGE_SLOT = 12

# Lines scanned between progress reports / cancellation checks
CHUNK_SIZE = 1000

# Every dump contains at least one term declaration
TERM_MARKER_RE = re.compile(r"string\s+Term")

TERM_RE = re.compile(r'string\s+Term\s*=\s*"([^"]+)"')
SLOT_RE = re.compile(r'^\s*\[(\d+)\]')
# Greedy: escaped quotes inside the value stay part of the capture
DATA_RE = re.compile(r'string\s+data\s*=\s*"(.*)"')
_INDENT_RE = re.compile(r'^\s*')

DEFAULT_BASE_NAME = "Localization"
DEFAULT_EXTENSION = ".txt"

SUFFIX_TRANSLATED = "_Translated"
SUFFIX_REVERSED = "_Reversed"
SUFFIX_TERMS = "_Terms"


# ── Ingestion ────────────────────────────────────────────────────

def read_text_file(path: str) -> str:
    """Read a whole file as UTF-8 text in a single open/read/close."""
    try:
        size = os.path.getsize(path)
    except OSError as e:
        raise ReadFailureError(f"Cannot read {path}: {e}") from e
    if size > MAX_INPUT_BYTES:
        raise OversizedInputError(
            f"{os.path.basename(path)} is {size // (1024 * 1024)} MB; "
            f"the limit is {MAX_INPUT_BYTES // (1024 * 1024)} MB."
        )
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise ReadFailureError(f"Cannot read {path}: {e}") from e
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ReadFailureError(
            f"{os.path.basename(path)} is not valid UTF-8 text "
            f"(byte {e.start})."
        ) from e


def write_text_file(path: str, text: str):
    """Write text as UTF-8 exactly as given (no newline translation)."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def load_document(text: str) -> Document:
    """Validate raw dump text and build its line store.

    Raises:
        EmptyInputError: text is empty or whitespace only.
        OversizedInputError: text exceeds MAX_INPUT_BYTES once encoded.
        MalformedInputError: text has no term declaration marker.
    """
    if not text or not text.strip():
        raise EmptyInputError("The localization file is empty.")
    if len(text) > MAX_INPUT_BYTES // 4 and len(text.encode("utf-8")) > MAX_INPUT_BYTES:
        raise OversizedInputError(
            f"The localization text exceeds {MAX_INPUT_BYTES // (1024 * 1024)} MB."
        )
    if not TERM_MARKER_RE.search(text):
        raise MalformedInputError(
            'No "string Term" declarations found. '
            "Please select a Unity localization text dump."
        )
    return Document.from_text(text)


def validate_language_slot(slot: int) -> int:
    if isinstance(slot, bool) or not isinstance(slot, int):
        raise ValueError(f"Language slot must be an integer, got {slot!r}")
    if not 0 <= slot <= MAX_LANGUAGE_SLOT:
        raise ValueError(f"Language slot must be 0..{MAX_LANGUAGE_SLOT}, got {slot}")
    return slot


# ── Extraction ───────────────────────────────────────────────────

class CancelToken:
    """Thread-safe flag checked by extraction between chunks."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class TermExtractor:
    """Single forward pass over a Document collecting terms for one slot.

    The pass is split into ranges of ``chunk_size`` lines.  ``iter_chunks``
    yields integer percent progress after each range so a caller can
    report progress or stop between ranges; the result does not depend
    on the chunk size.
    """

    def __init__(self, document: Document, language_slot: int,
                 chunk_size: int = CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.document = document
        self.language_slot = validate_language_slot(language_slot)
        self.chunk_size = chunk_size
        self._reset()

    def _reset(self):
        self.terms: list[ExtractedTerm] = []
        self._term: Optional[str] = None
        self._term_line = -1
        self._text = ""
        self._data_line: Optional[int] = None
        self._slot: Optional[int] = None
        self._found_data = False

    def _close_term(self):
        """Emit the term being built, if any."""
        if self._term is None:
            return
        self.terms.append(ExtractedTerm(
            term=self._term,
            original_text=self._text,
            term_line_index=self._term_line,
            data_line_index=self._data_line,
        ))
        self._term = None

    def _scan_line(self, index: int):
        lines = self.document.lines
        line = lines[index]

        m = TERM_RE.search(line)
        if m:
            self._close_term()
            self._term = m.group(1)
            self._term_line = index
            self._text = ""
            self._data_line = None
            self._slot = None
            self._found_data = False

        if self._term is None:
            return

        m = SLOT_RE.match(line)
        if m:
            self._slot = int(m.group(1))

        # Only the first data line after the target slot's marker is taken
        if (not self._found_data and self._slot == self.language_slot
                and index + 1 < len(lines)):
            data = DATA_RE.search(lines[index + 1])
            if data:
                self._text = data.group(1)
                self._data_line = index + 1
                self._found_data = True

    def iter_chunks(self) -> Iterator[int]:
        """Run the pass from the top, yielding percent done after each chunk.

        When the generator is exhausted ``self.terms`` holds the result.
        """
        self._reset()
        total = len(self.document)
        for start in range(0, total, self.chunk_size):
            stop = min(start + self.chunk_size, total)
            for index in range(start, stop):
                self._scan_line(index)
            if stop == total:
                self._close_term()
            yield stop * 100 // total

    def run(self) -> list:
        """Run the whole pass synchronously."""
        for _ in self.iter_chunks():
            pass
        return self.terms


def extract_terms(document: Document, language_slot: int,
                  on_progress: Optional[Callable[[int], None]] = None,
                  cancel_token: Optional[CancelToken] = None,
                  chunk_size: int = CHUNK_SIZE) -> list:
    """Extract every term with its value for ``language_slot``.

    Args:
        document: Line store to scan.
        language_slot: Index of the `[N]` marker whose data line to capture.
        on_progress: Called with integer percent after each chunk.
        cancel_token: Checked between chunks.
        chunk_size: Lines per chunk.

    Returns:
        List of ExtractedTerm in document order (empty if the document
        has no term declarations).

    Raises:
        ExtractionCancelled: the token was cancelled before the pass finished.
    """
    extractor = TermExtractor(document, language_slot, chunk_size)
    for percent in extractor.iter_chunks():
        log.debug("Extraction %d%% (slot %d)", percent, language_slot)
        if on_progress is not None:
            on_progress(percent)
        if percent < 100 and cancel_token is not None and cancel_token.cancelled:
            log.info("Extraction cancelled at %d%%", percent)
            raise ExtractionCancelled(f"Extraction cancelled at {percent}%.")

    terms = extractor.terms
    if not terms:
        log.warning("No terms found in %d lines", len(document))
    else:
        with_data = sum(1 for t in terms if t.data_line_index is not None)
        log.info("Extracted %d terms (%d with slot %d data)",
                 len(terms), with_data, language_slot)
    return terms


# ── Injection ────────────────────────────────────────────────────

def _data_line(indentation: str, value: str) -> str:
    return f'{indentation}string data = "{value}"'


def apply_translations(document: Document, terms: list, translation_map: dict,
                       transform: Optional[Callable[[str], str]] = None) -> tuple:
    """Write translations into the data lines recorded during extraction.

    Lines are addressed only by ``data_line_index``; the document is
    never searched by content.  The input document is left unchanged.

    Args:
        document: Source line store.
        terms: Extracted terms holding the target line indices.
        translation_map: term -> translated value (already escaped).
        transform: Optional per-value rewrite applied at write time.

    Returns:
        (updated Document, number of lines replaced)
    """
    updated = document.copy()
    applied = 0
    for item in terms:
        if item.data_line_index is None or item.term not in translation_map:
            continue
        value = translation_map[item.term]
        if transform is not None:
            value = transform(value)
        indentation = _INDENT_RE.match(document[item.data_line_index]).group(0)
        updated.set_line(item.data_line_index, _data_line(indentation, value))
        applied += 1
    log.info("Applied %d translations", applied)
    return updated, applied


def apply_reversed_translations(document: Document, terms: list,
                                translation_map: dict) -> tuple:
    """Like apply_translations, with each value reversed for engines that
    render right-to-left text back to front."""
    return apply_translations(document, terms, translation_map,
                              transform=reverse_for_display)


# ── Output naming ────────────────────────────────────────────────

def output_file_name(input_name: str, suffix: str,
                     extension: Optional[str] = None) -> str:
    """Derive an output file name by inserting ``suffix`` before the extension.

    ``Loc.txt`` + ``_Translated`` -> ``Loc_Translated.txt``.  Without an
    input name the base is ``Localization`` with a ``.txt`` extension.
    ``extension`` (e.g. ``".json"``) replaces the extension when given.
    """
    if input_name:
        base, ext = os.path.splitext(os.path.basename(input_name))
        ext = ext or DEFAULT_EXTENSION
    else:
        base, ext = DEFAULT_BASE_NAME, DEFAULT_EXTENSION
    if extension:
        ext = extension
    return f"{base}{suffix}{ext}"
