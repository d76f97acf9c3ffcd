"""
Tests for the Unity dump parser: ingestion, term extraction and injection.

Run with: pytest tests/test_unity_text.py -v
"""

import pytest

from unity_translator import unity_text
from unity_translator.errors import (
    EmptyInputError, ExtractionCancelled, MalformedInputError,
    OversizedInputError, ReadFailureError,
)
from unity_translator.project_model import Document, ExtractedTerm
from unity_translator.text_processor import RTL_MARK
from unity_translator.unity_text import (
    DATA_RE, CancelToken, TermExtractor, apply_reversed_translations,
    apply_translations, extract_terms, load_document, output_file_name,
    read_text_file, validate_language_slot, write_text_file,
)


class TestExtraction:
    """Tests for the line-indexed term extractor."""

    def test_single_term(self):
        """A term, its slot marker and data line produce one entry."""
        doc = Document(lines=['  string Term = "Greeting"', "  [0]", '  string data = "Hello"'])
        terms = extract_terms(doc, 0)

        assert terms == [ExtractedTerm(term="Greeting", original_text="Hello",
                                       term_line_index=0, data_line_index=2)]

    def test_slot_zero(self, sample_document):
        """Slot 0 picks the first value of every term."""
        terms = extract_terms(sample_document, 0)

        assert [(t.term, t.original_text, t.term_line_index, t.data_line_index)
                for t in terms] == [
            ("Menu/Start", "Start Game", 2, 5),
            ("Menu/Quit", "Quit", 8, 10),
            ("Menu/Empty", "", 13, 15),
            ("Dialog/Quote", "", 16, None),
        ]

    def test_slot_one(self, sample_document):
        """Slot 1 picks the values under the [1] markers."""
        terms = extract_terms(sample_document, 1)

        assert [(t.term, t.original_text, t.data_line_index) for t in terms] == [
            ("Menu/Start", "Commencer", 7),
            ("Menu/Quit", "Quitter", 12),
            ("Menu/Empty", "", None),
            ("Dialog/Quote", r"Il a dit \"salut\"", 18),
        ]

    def test_term_without_slot_still_emitted(self, sample_document):
        """Terms lacking the target slot are kept with no data line."""
        terms = extract_terms(sample_document, 5)

        assert len(terms) == 4
        assert all(t.original_text == "" and t.data_line_index is None for t in terms)

    def test_deterministic(self, sample_document):
        """Running extraction twice yields identical results."""
        assert extract_terms(sample_document, 0) == extract_terms(sample_document, 0)

    def test_extractor_restarts_from_top(self, sample_document):
        """Re-running the same extractor object does not accumulate terms."""
        extractor = TermExtractor(sample_document, 1)
        first = list(extractor.run())
        second = extractor.run()

        assert first == second
        assert len(second) == 4

    @pytest.mark.parametrize("chunk_size", [1, 2, 3, 7, 1000])
    def test_chunk_size_does_not_change_result(self, sample_document, chunk_size):
        """Chunk boundaries never split the state machine."""
        expected = extract_terms(sample_document, 1)
        assert extract_terms(sample_document, 1, chunk_size=chunk_size) == expected

    def test_first_data_line_wins(self):
        """Later data lines under the same slot marker are ignored."""
        doc = Document(lines=[
            'string Term = "A"',
            "[0]",
            'string data = "first"',
            'string data = "second"',
            "[0]",
            'string data = "third"',
        ])
        terms = extract_terms(doc, 0)

        assert terms[0].original_text == "first"
        assert terms[0].data_line_index == 2

    def test_data_line_after_intermediate_line(self):
        """The first data line after the marker is found even if not adjacent."""
        doc = Document(lines=[
            'string Term = "A"',
            " [0]",
            "  0 int size = 1",
            '  1 string data = "value"',
        ])
        terms = extract_terms(doc, 0)

        assert terms[0].original_text == "value"
        assert terms[0].data_line_index == 3

    def test_new_term_resets_slot(self):
        """A slot marker seen under one term does not carry into the next."""
        doc = Document(lines=[
            'string Term = "A"',
            "[0]",
            'string Term = "B"',
            'string data = "belongs to nothing"',
        ])
        terms = extract_terms(doc, 0)

        assert [(t.term, t.data_line_index) for t in terms] == [("A", None), ("B", None)]

    def test_lines_before_first_term_ignored(self):
        """Markers and data before any term declaration are skipped."""
        doc = Document(lines=["[0]", 'string data = "orphan"', 'string Term = "A"'])
        terms = extract_terms(doc, 0)

        assert terms == [ExtractedTerm("A", "", 2, None)]

    def test_no_terms(self):
        """A document without term declarations yields an empty list."""
        assert extract_terms(Document.from_text("hello\nworld"), 0) == []

    def test_data_lines_match_pattern(self, sample_document):
        """Every recorded data line holds a data value declaration."""
        for slot in (0, 1):
            for t in extract_terms(sample_document, slot):
                if t.data_line_index is not None:
                    assert DATA_RE.search(sample_document[t.data_line_index])

    def test_progress_reported_per_chunk(self, sample_document):
        """Progress is integer percent of lines processed after each chunk."""
        reported = []
        extract_terms(sample_document, 0, on_progress=reported.append, chunk_size=5)

        assert reported == [26, 52, 78, 100]

    def test_cancel_between_chunks(self, sample_document):
        """A cancelled token stops extraction at the next chunk boundary."""
        token = CancelToken()
        reported = []

        def on_progress(percent):
            reported.append(percent)
            token.cancel()

        with pytest.raises(ExtractionCancelled):
            extract_terms(sample_document, 0, on_progress=on_progress,
                          cancel_token=token, chunk_size=5)
        assert reported == [26]

    def test_invalid_chunk_size(self, sample_document):
        with pytest.raises(ValueError):
            TermExtractor(sample_document, 0, chunk_size=0)

    @pytest.mark.parametrize("slot", [-1, 13, True, "0"])
    def test_invalid_language_slot(self, sample_document, slot):
        with pytest.raises(ValueError):
            extract_terms(sample_document, slot)

    def test_valid_language_slot_range(self):
        assert validate_language_slot(0) == 0
        assert validate_language_slot(12) == 12


class TestInjection:
    """Tests for writing translations back by line index."""

    def test_replaces_data_line(self):
        """The data line is rewritten with its indentation kept."""
        doc = Document(lines=['  string Term = "Greeting"', "  [0]", '    1 string data = "Hello"'])
        terms = extract_terms(doc, 0)
        updated, applied = apply_translations(doc, terms, {"Greeting": "Bonjour"})

        assert applied == 1
        assert updated.lines == [
            '  string Term = "Greeting"', "  [0]", '    string data = "Bonjour"',
        ]

    def test_input_document_untouched(self, sample_document):
        """Injection returns a new document."""
        before = list(sample_document.lines)
        terms = extract_terms(sample_document, 0)
        apply_translations(sample_document, terms, {"Menu/Start": "Démarrer"})

        assert sample_document.lines == before

    def test_only_target_lines_change(self, sample_document):
        """Lines outside the recorded data line set stay byte-identical."""
        terms = extract_terms(sample_document, 1)
        translations = {"Menu/Start": "Iniziare", "Dialog/Quote": "Ha detto ciao"}
        updated, _ = apply_translations(sample_document, terms, translations)

        changed = {i for i, (a, b) in enumerate(zip(sample_document.lines, updated.lines))
                   if a != b}
        assert changed == {7, 18}
        assert len(updated) == len(sample_document)

    def test_applied_count(self, sample_document):
        """Count covers terms that have a translation and a data line."""
        terms = extract_terms(sample_document, 0)
        translations = {
            "Menu/Start": "A",
            "Menu/Empty": "B",
            "Dialog/Quote": "C",     # no slot 0 data line
            "Unknown": "D",          # not in the document
        }
        _, applied = apply_translations(sample_document, terms, translations)

        expected = sum(1 for t in terms
                       if t.term in translations and t.data_line_index is not None)
        assert applied == expected == 2

    def test_untranslated_terms_untouched(self, sample_document):
        terms = extract_terms(sample_document, 0)
        updated, applied = apply_translations(sample_document, terms, {})

        assert applied == 0
        assert updated.to_text() == sample_document.to_text()

    def test_duplicate_terms_each_written(self):
        """Repeated keys are written at each of their own data lines."""
        doc = Document(lines=[
            'string Term = "Dup"', "[0]", 'string data = "one"',
            'string Term = "Dup"', "[0]", 'string data = "two"',
        ])
        terms = extract_terms(doc, 0)
        updated, applied = apply_translations(doc, terms, {"Dup": "X"})

        assert applied == 2
        assert updated[2] == 'string data = "X"'
        assert updated[5] == 'string data = "X"'

    def test_reversed_variant(self):
        """Reversed injection writes each value back to front."""
        doc = Document(lines=['string Term = "Greeting"', "[0]", '  string data = "Hello"'])
        terms = extract_terms(doc, 0)
        translations = {"Greeting": RTL_MARK + "سلام"}
        updated, applied = apply_reversed_translations(doc, terms, translations)

        assert applied == 1
        assert updated[2] == '  string data = "مالس"'
        assert translations == {"Greeting": RTL_MARK + "سلام"}

    def test_crlf_document_round_trip(self):
        """CRLF input is written back with CRLF."""
        text = 'string Term = "A"\r\n[0]\r\nstring data = "x"\r\n'
        doc = load_document(text)
        updated, _ = apply_translations(doc, extract_terms(doc, 0), {"A": "y"})

        assert updated.to_text() == 'string Term = "A"\r\n[0]\r\nstring data = "y"\r\n'


class TestIngestion:
    """Tests for input validation and file access."""

    @pytest.mark.parametrize("text", ["", "   \n\t\n"])
    def test_empty_input(self, text):
        with pytest.raises(EmptyInputError):
            load_document(text)

    def test_missing_marker(self):
        with pytest.raises(MalformedInputError):
            load_document("just some text\nwithout terms")

    @pytest.mark.parametrize("line", ['string\tTerm = "A"', 'string  Term = "A"'])
    def test_marker_allows_any_whitespace(self, line):
        """Dumps accepted by the term pattern also pass the marker check."""
        doc = load_document(line + "\n[0]\nstring data = \"x\"")
        assert [t.term for t in extract_terms(doc, 0)] == ["A"]

    def test_oversized_text(self, monkeypatch):
        monkeypatch.setattr(unity_text, "MAX_INPUT_BYTES", 40)
        with pytest.raises(OversizedInputError):
            load_document('string Term = "A"\n' + "x" * 60)

    def test_valid_document(self, sample_text):
        doc = load_document(sample_text)
        assert len(doc) == sample_text.count("\n") + 1

    def test_read_text_file(self, tmp_path, sample_text):
        path = tmp_path / "loc.txt"
        path.write_bytes(sample_text.encode("utf-8"))
        assert read_text_file(str(path)) == sample_text

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(ReadFailureError):
            read_text_file(str(tmp_path / "missing.txt"))

    def test_read_invalid_utf8(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_bytes(b"string Term = \"A\"\n\xff\xfe\xfa")
        with pytest.raises(ReadFailureError):
            read_text_file(str(path))

    def test_read_oversized_file(self, tmp_path, monkeypatch):
        """Files over the limit are rejected before being read."""
        path = tmp_path / "big.txt"
        path.write_bytes(b"x" * 64)
        monkeypatch.setattr(unity_text, "MAX_INPUT_BYTES", 10)
        with pytest.raises(OversizedInputError):
            read_text_file(str(path))

    def test_write_keeps_line_endings(self, tmp_path):
        path = tmp_path / "out.txt"
        write_text_file(str(path), "a\r\nb\nc")
        assert path.read_bytes() == b"a\r\nb\nc"


class TestOutputFileName:
    """Tests for output file naming."""

    def test_suffix_before_extension(self):
        assert output_file_name("Localization.txt", "_Translated") == "Localization_Translated.txt"

    def test_other_extension_preserved(self):
        assert output_file_name("I2Languages.dump", "_Reversed") == "I2Languages_Reversed.dump"

    def test_no_extension_gets_default(self):
        assert output_file_name("I2Languages", "_Terms") == "I2Languages_Terms.txt"

    def test_no_input_name(self):
        assert output_file_name("", "_Translated") == "Localization_Translated.txt"

    def test_extension_override(self):
        assert output_file_name("Loc.txt", "_Terms", ".json") == "Loc_Terms.json"

    def test_directory_stripped(self):
        assert output_file_name("/tmp/game/Loc.txt", "_Terms") == "Loc_Terms.txt"
