import pytest

from personal_site.bibliography import Note, Publication, get_publications
from personal_site.formatting import (
    clean_text,
    format_authors,
    format_citation_suffix,
    format_publication,
    render_notes,
)


@pytest.mark.parametrize("authors,expected", [
    ("Jane Doe and John Smith", "Jane Doe, and John Smith"),
    ("Jane Doe", "Jane Doe"),
    ("  Jane Doe  ", "Jane Doe"),
    ("A and B and C", "A, B, and C"),
    ("A AND B", "A, and B"),
    ("", ""),
    (None, ""),
])
def test_format_authors(authors, expected):
    assert format_authors(authors) == expected


def test_format_authors_does_not_split_inside_names():
    assert format_authors("Alexandra Anderson and Sandy Brand") == "Alexandra Anderson, and Sandy Brand"


def test_clean_text_strips_braces():
    assert clean_text("A Tour of {Majuli}  Island") == "A Tour of Majuli Island"
    assert clean_text(None) == ""


def test_citation_suffix_order(sample_publication):
    assert format_citation_suffix(sample_publication) == ", pp. 1--10, vol. 4, no. 2, ACM"


def test_citation_suffix_skips_missing_fields():
    assert format_citation_suffix(Publication(key="k", volume="3")) == ", vol. 3"
    assert format_citation_suffix(Publication(key="k")) == ""


def test_render_notes_links_and_separators():
    html = render_notes((Note("Best Paper", "http://x"), Note("Code"), Note("Slides")))
    assert '<a href="http://x" target="_blank" rel="noopener noreferrer">Best Paper</a>' in html
    assert "Code" in html
    assert html.count("•") == 2
    assert not html.rstrip().endswith("</span> •")


def test_render_notes_single_note_has_no_separator():
    assert "•" not in render_notes((Note("Code"),))


def test_render_notes_escapes_text():
    html = render_notes((Note("<b>award</b>", 'http://x?a=1&b="2"'),))
    assert "&lt;b&gt;award&lt;/b&gt;" in html
    assert "&amp;" in html
    assert "<b>" not in html


def test_render_notes_empty():
    assert render_notes(()) == ""


def test_full_listing_quotes_title_and_adds_citation(sample_publication):
    formatted = format_publication(sample_publication, full_listing=True)
    assert formatted["title"] == '"Newest Work"'
    assert formatted["citation"] == ", pp. 1--10, vol. 4, no. 2, ACM"
    assert formatted["entry_type"] == "INPROCEEDINGS"
    assert formatted["year"] == "2023"
    assert formatted["authors"] == "Jane Doe, and John Smith"


def test_summary_leaves_title_unquoted(sample_publication):
    formatted = format_publication(sample_publication)
    assert formatted["title"] == "Newest Work"
    assert formatted["citation"] == ""
    assert formatted["journal"] == "Proceedings of Testing"


def test_missing_title_is_not_quoted():
    formatted = format_publication(Publication(key="k"), full_listing=True)
    assert formatted["title"] == ""
    assert formatted["year"] == ""
    assert formatted["url"] == ""


def test_accented_entry_formats_without_latex(tmp_path):
    path = tmp_path / "accents.bib"
    path.write_text(
        "@article{cafe,\n"
        "  title = {Caf{\\'e} Society},\n"
        "  author = {J{\\\"o}rg M{\\\"u}ller and Ann B}\n"
        "}\n",
        encoding="utf-8",
    )
    (pub,) = get_publications(path)
    formatted = format_publication(pub, full_listing=True)
    assert formatted["title"] == '"Café Society"'
    assert formatted["authors"] == "Jörg Müller, and Ann B"
