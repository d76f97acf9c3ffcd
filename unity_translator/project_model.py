"""Data model for the line store and extracted localization terms."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Document:
    """A localization dump held as an ordered list of lines.

    Lines are never inserted or removed once the document exists; the
    only mutation is replacing the text of one line.  Line indices
    recorded during extraction therefore stay valid for the lifetime of
    the document.
    """
    lines: list = field(default_factory=list)
    newline: str = "\n"    # "\r\n" when every line break in the source was CRLF

    @classmethod
    def from_text(cls, text: str) -> "Document":
        """Split text into lines, normalising CRLF to LF once."""
        crlf = text.count("\r\n")
        newline = "\r\n" if crlf and crlf == text.count("\n") else "\n"
        return cls(lines=text.replace("\r\n", "\n").split("\n"), newline=newline)

    def to_text(self) -> str:
        """Join lines back into text using the source's line ending."""
        return self.newline.join(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> str:
        return self.lines[index]

    def set_line(self, index: int, text: str):
        """Replace the text of a single existing line."""
        if "\n" in text:
            raise ValueError("Replacement text must not contain a line break")
        if not 0 <= index < len(self.lines):
            raise IndexError(f"Line index {index} out of range (0..{len(self.lines) - 1})")
        self.lines[index] = text

    def copy(self) -> "Document":
        return Document(lines=list(self.lines), newline=self.newline)


@dataclass(frozen=True)
class ExtractedTerm:
    """One localization entry for the selected language slot."""
    term: str                 # Localization key e.g. "Menu/Start"
    original_text: str        # Value under the target slot ("" if none found)
    term_line_index: int      # Line holding `string Term = "..."`
    data_line_index: Optional[int] = None  # Line holding the slot's `string data = "..."`

    @property
    def has_data_line(self) -> bool:
        return self.data_line_index is not None

    def to_dict(self) -> dict:
        """Record shape used by the JSON export."""
        return {
            "term": self.term,
            "originalText": self.original_text,
            "dataLineIndex": self.data_line_index,
        }
