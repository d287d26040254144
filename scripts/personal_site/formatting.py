"""Display formatting for publication records."""

import re

from markupsafe import Markup, escape

AUTHOR_SEPARATOR = re.compile(r"\s+and\s+", re.IGNORECASE)
NOTE_SEPARATOR = "•"


def clean_text(text) -> str:
    """Strip BibTeX grouping braces and collapse whitespace."""
    if not text:
        return ""
    text = re.sub(r"[{}]", "", str(text))
    return " ".join(text.split())


def format_authors(authors) -> str:
    """'A and B and C' -> 'A, B, and C'."""
    if not authors or not authors.strip():
        return ""
    names = [name.strip() for name in AUTHOR_SEPARATOR.split(authors.strip())]
    if len(names) > 1:
        names[-1] = f"and {names[-1]}"
    return ", ".join(names)


def format_citation_suffix(pub) -> str:
    """Pages, volume, number and publisher fragments, in that order."""
    suffix = ""
    if pub.pages:
        suffix += f", pp. {pub.pages}"
    if pub.volume:
        suffix += f", vol. {pub.volume}"
    if pub.number:
        suffix += f", no. {pub.number}"
    if pub.publisher:
        suffix += f", {pub.publisher}"
    return suffix


def render_notes(notes) -> Markup:
    """Notes as HTML: linked when they have a URL, separated by a bullet."""
    parts = []
    for note in notes:
        if note.url:
            text = (
                f'<a href="{escape(note.url)}" target="_blank" '
                f'rel="noopener noreferrer">{escape(note.text)}</a>'
            )
        else:
            text = str(escape(note.text))
        parts.append(f'<span class="pub-note">{text}</span>')
    separator = f' <span class="pub-note-sep">{NOTE_SEPARATOR}</span> '
    return Markup(separator.join(parts))


def format_publication(pub, full_listing: bool = False) -> dict:
    """
    Turn a Publication into the strings the templates print.

    The full listing quotes titles and appends the citation suffix; the
    summary widget shows the bare title and journal.
    """
    title = clean_text(pub.title)
    if title and full_listing:
        title = f'"{title}"'

    return {
        "key": pub.key,
        "year": str(pub.year) if pub.year is not None else "",
        "entry_type": pub.entry_type.upper(),
        "title": title,
        "authors": format_authors(clean_text(pub.authors)),
        "journal": clean_text(pub.journal),
        "citation": format_citation_suffix(pub) if full_listing else "",
        "url": pub.url or "",
        "notes": render_notes(pub.notes),
    }
