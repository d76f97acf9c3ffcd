"""Translation file parser and right-to-left text processing.

Translation files are plain text made of blocks separated by blank lines.
The first line of a block is the term key, the second its translation::

    Menu/Start
    شروع بازی

    Menu/Quit
    خروج

Values are escaped for the `string data = "..."` line they are written
into, and Persian/Arabic values get a right-to-left embedding mark so
they display correctly inside a left-to-right host.
"""

import logging
import re

log = logging.getLogger(__name__)

# Right-To-Left Embedding / Left-To-Right Embedding
RTL_MARK = "\u202b"
LTR_MARK = "\u202a"
_DIRECTION_MARKS = (RTL_MARK, LTR_MARK, "\u200f", "\u200e")

BOM = "\ufeff"

# Arabic block (covers Persian letters as well)
PERSIAN_RE = re.compile(r"[\u0600-\u06ff]")

# Quotes not already escaped with a backslash
_UNESCAPED_QUOTE_RE = re.compile(r'(?<!\\)"')

# Arabic letter forms -> Persian letters, for engines without Arabic shaping
ARABIC_TO_PERSIAN = str.maketrans({
    "\u064a": "\u06cc",  # ي Arabic yeh
    "\u0649": "\u06cc",  # ى alef maksura
    "\ufef1": "\u06cc",  # yeh isolated
    "\ufef2": "\u06cc",  # yeh final
    "\ufef3": "\u06cc",  # yeh initial
    "\ufef4": "\u06cc",  # yeh medial
    "\ufeef": "\u06cc",  # alef maksura isolated
    "\ufef0": "\u06cc",  # alef maksura final
    "\u0643": "\u06a9",  # ك Arabic kaf
    "\ufed9": "\u06a9",  # kaf isolated
    "\ufeda": "\u06a9",  # kaf final
    "\ufedb": "\u06a9",  # kaf initial
    "\ufedc": "\u06a9",  # kaf medial
})


def has_persian(text: str) -> bool:
    return bool(PERSIAN_RE.search(text))


def escape_special_characters(text: str) -> str:
    """Escape double quotes so they cannot end the data string early.

    Quotes that are already escaped are left alone, so escaping twice
    gives the same result as escaping once.
    """
    return _UNESCAPED_QUOTE_RE.sub(r'\\"', text)


def unescape_special_characters(text: str) -> str:
    return text.replace('\\"', '"')


def apply_rtl_formatting(text: str) -> str:
    """Prefix Persian/Arabic text with a right-to-left embedding mark."""
    if has_persian(text) and not text.startswith(RTL_MARK):
        return RTL_MARK + text
    return text


def format_translation(text: str) -> str:
    """Prepare a raw translation for injection: escape, then RTL mark."""
    return apply_rtl_formatting(escape_special_characters(text))


def reverse_for_display(value: str) -> str:
    """Rewrite a prepared translation for engines that draw RTL text backwards.

    Directional marks are dropped, Arabic letter forms are mapped to
    their Persian equivalents and the characters are reversed.  Quote
    escaping is undone before reversing and reapplied afterwards so the
    backslash stays in front of its quote.
    """
    text = value
    while text.startswith(_DIRECTION_MARKS):
        text = text[1:]
    text = unescape_special_characters(text).translate(ARABIC_TO_PERSIAN)
    return escape_special_characters(text[::-1])


def strip_bom(content: str) -> str:
    """Drop a leading UTF-8 byte order mark (Notepad adds one by default)."""
    if content.startswith(BOM):
        return content[1:]
    return content


def iter_blocks(content: str):
    """Yield the stripped, non-blank lines of each block.

    Only empty lines end a block.  Whitespace-only lines are dropped
    from the block they sit in.
    """
    block = []
    for line in strip_bom(content).replace("\r\n", "\n").split("\n"):
        if not line:
            if block:
                yield block
                block = []
            continue
        stripped = line.strip()
        if stripped:
            block.append(stripped)
    if block:
        yield block


def parse_translation_file(content: str) -> dict:
    """Parse a translation file into a term -> prepared translation map.

    Blocks with fewer than two lines are skipped; lines after the second
    are ignored.  A repeated term keeps the last block's translation.
    """
    translation_map = {}
    skipped = 0
    for block in iter_blocks(content):
        if len(block) < 2:
            skipped += 1
            continue
        term, translation = block[0], block[1]
        translation_map[term] = format_translation(translation)

    if skipped:
        log.warning("Skipped %d translation blocks without a translation line", skipped)
    log.info("Parsed %d translations", len(translation_map))
    return translation_map
