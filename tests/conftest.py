"""Shared fixtures: a small Unity localization dump with two language slots."""

import pytest

from unity_translator.project_model import Document

SAMPLE_LINES = [
    "0 MonoBehaviour Base",
    " 0 TermData mTerms",
    '  1 string Term = "Menu/Start"',
    "  0 vector Languages",
    "   [0]",
    '    1 string data = "Start Game"',
    "   [1]",
    '    1 string data = "Commencer"',
    '  1 string Term = "Menu/Quit"',
    "   [0]",
    '    1 string data = "Quit"',
    "   [1]",
    '    1 string data = "Quitter"',
    '  1 string Term = "Menu/Empty"',
    "   [0]",
    '    1 string data = ""',
    '  1 string Term = "Dialog/Quote"',
    "   [1]",
    r'    1 string data = "Il a dit \"salut\""',
]


@pytest.fixture
def sample_text():
    return "\n".join(SAMPLE_LINES)


@pytest.fixture
def sample_document(sample_text):
    return Document.from_text(sample_text)
