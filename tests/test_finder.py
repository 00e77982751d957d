"""Tests for CLI output."""
import json
import sys

import finder
from bookfinder.models import Book
from bookfinder.pipeline import SearchSession

BOOKS = [
    Book("/works/1", "Animal Farm", "George Orwell", 1945, 3.95, 112, None, "Fiction", None),
    Book("/works/2", "Dune", "Frank Herbert", "Unknown", 4.3, 412, None, "General", "0441013597"),
]


def test_display_json(capsys):
    """JSON output is a list of book dicts."""
    finder.display_books(BOOKS, "json")

    data = json.loads(capsys.readouterr().out)
    assert [d["id"] for d in data] == ["/works/1", "/works/2"]
    assert data[1]["publishYear"] == "Unknown"
    assert data[1]["coverUrl"] is None


def test_display_compact(capsys):
    """Compact output is one numbered line per book."""
    finder.display_books(BOOKS, "compact")

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("1. Animal Farm - George Orwell (1945)")
    assert lines[1].endswith("4.3")


def test_display_table(capsys):
    """Table output includes headers and titles."""
    finder.display_books(BOOKS, "table")

    out = capsys.readouterr().out
    assert "Animal Farm" in out
    assert "Rating" in out


def test_popular_command(monkeypatch, capsys):
    """The popular command lists suggested titles and genres."""
    monkeypatch.setattr(sys, "argv", ["finder.py", "popular"])

    finder.main()

    out = capsys.readouterr().out
    assert "Harry Potter" in out
    assert "Biography" in out


def test_report_empty_json_prints_list(capsys):
    """An empty result still prints valid JSON."""
    finder.report(SearchSession(term="zzz"), [], "json")

    assert json.loads(capsys.readouterr().out) == []
