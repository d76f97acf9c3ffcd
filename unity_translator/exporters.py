"""Serialisers for extracted terms: translation pairs, JSON and CSV."""

import csv
import io
import json

CSV_HEADER = ("Term", "Text", "Translation")


def export_pairs(terms: list) -> str:
    """Render ``term`` / ``original text`` blocks separated by a blank line.

    This is the same layout ``parse_translation_file`` reads, so a
    translator can fill in the second line of each block and import the
    file back.
    """
    return "\n\n".join(f"{t.term}\n{t.original_text}" for t in terms)


def export_json(terms: list) -> str:
    """JSON array of ``{term, originalText, dataLineIndex}`` records."""
    return json.dumps([t.to_dict() for t in terms], ensure_ascii=False, indent=2)


def export_csv(terms: list, translation_map: dict = None) -> str:
    """CSV table with a ``Term,Text,Translation`` header and quoted rows."""
    translation_map = translation_map or {}
    buf = io.StringIO()
    buf.write(",".join(CSV_HEADER) + "\n")
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for t in terms:
        writer.writerow([t.term, t.original_text, translation_map.get(t.term, "")])
    return buf.getvalue()
