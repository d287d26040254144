"""
Bibliography pipeline: BibTeX file -> sorted, selected publication records.

Stages:
    load_bibliography    read the .bib file as text
    parse_bibliography   text -> {citation key: raw fields} via bibtexparser
    normalize_entry      raw fields -> Publication (case-folded field names)
    sort_by_year         newest first, entries without a year last
    select_publications  optional key filter, then truncation

get_publications() runs all of them and never raises: an unreadable file or a
parser failure just means "no publications".
"""

from dataclasses import dataclass
from pathlib import Path

import bibtexparser
from bibtexparser.bparser import BibTexParser
from bibtexparser.customization import convert_to_unicode


# Upper bound on NOTE{n} probing
MAX_NOTES = 50


@dataclass(frozen=True)
class Note:
    text: str
    url: str | None = None


@dataclass(frozen=True)
class Publication:
    key: str
    title: str = ""
    authors: str = ""
    journal: str = ""
    year: int | None = None
    url: str | None = None
    notes: tuple[Note, ...] = ()
    pages: str | None = None
    volume: str | None = None
    number: str | None = None
    publisher: str | None = None
    entry_type: str = "article"


# ============================================================================
# LOAD + PARSE
# ============================================================================

def load_bibliography(bib_path: Path) -> str:
    """Read the bibliography file. Raises OSError if it is missing or unreadable."""
    return Path(bib_path).read_text(encoding="utf-8")


def parse_bibliography(text: str) -> dict:
    """
    Parse BibTeX text into {citation key: raw entry}.

    LaTeX accents are decoded to unicode. The raw entry keeps whatever field
    names the parser yields, including ENTRYTYPE. Returns an empty dict when
    parsing fails or finds nothing.
    """
    parser = BibTexParser(common_strings=True, ignore_nonstandard_types=False)
    parser.customization = convert_to_unicode
    try:
        database = bibtexparser.loads(text, parser=parser)
    except Exception as e:
        print(f"  ⚠ Warning: BibTeX parsing failed: {e}")
        return {}

    entries = {}
    for entry in database.entries:
        fields = dict(entry)
        key = fields.pop("ID", None)
        if not key:
            continue
        entries[key] = fields

    if not entries:
        print("  ⚠ Warning: No BibTeX entries found")
    return entries


# ============================================================================
# NORMALIZE
# ============================================================================

def normalize_fields(raw: dict) -> dict:
    """Lower-case every field name; an all-caps variant (TITLE) beats others (title)."""
    fields = {}
    for name, value in raw.items():
        lowered = name.lower()
        if lowered not in fields or name.isupper():
            fields[lowered] = value
    return fields


def _text(fields: dict, name: str) -> str:
    value = fields.get(name)
    if value is None:
        return ""
    return str(value).strip()


def _optional(fields: dict, name: str) -> str | None:
    return _text(fields, name) or None


def parse_year(value) -> int | None:
    """Numeric year, or None when missing or not a number."""
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def extract_notes(fields: dict) -> tuple[Note, ...]:
    """
    Collect note1/note1url, note2/note2url, ... in index order.

    Stops at the first index without a note field. A note field that is
    present but empty is skipped without ending the scan.
    """
    notes = []
    for index in range(1, MAX_NOTES + 1):
        name = f"note{index}"
        if name not in fields:
            break
        text = _text(fields, name)
        if text:
            notes.append(Note(text=text, url=_optional(fields, f"{name}url")))
    return tuple(notes)


def normalize_entry(key: str, raw: dict) -> Publication:
    """Build a Publication from one parsed entry."""
    fields = normalize_fields(raw)
    return Publication(
        key=key,
        title=_text(fields, "title"),
        authors=_text(fields, "author"),
        journal=_text(fields, "journal") or _text(fields, "booktitle"),
        year=parse_year(fields.get("year")),
        url=_optional(fields, "url"),
        notes=extract_notes(fields),
        pages=_optional(fields, "pages"),
        volume=_optional(fields, "volume"),
        number=_optional(fields, "number"),
        publisher=_optional(fields, "publisher"),
        entry_type=_text(fields, "entrytype") or _text(fields, "type") or "article",
    )


# ============================================================================
# SORT + SELECT
# ============================================================================

def sort_by_year(publications) -> list[Publication]:
    """Newest first. Missing years count as 0; ties keep their original order."""
    return sorted(publications, key=lambda pub: pub.year or 0, reverse=True)


def select_publications(publications, selected_keys=None, max_items=None) -> list[Publication]:
    """
    Keep entries whose key is in selected_keys (when given and non-empty),
    in input order, then keep the first max_items (None means all).
    """
    if max_items is not None and max_items < 0:
        raise ValueError(f"max_items must be >= 0, got {max_items}")

    selected = list(publications)
    if selected_keys:
        wanted = set(selected_keys)
        selected = [pub for pub in selected if pub.key in wanted]

    if max_items is not None:
        selected = selected[:max_items]
    return selected


# ============================================================================
# PIPELINE
# ============================================================================

def get_publications(bib_path: Path, selected_keys=None, max_items=None) -> list[Publication]:
    """
    Load, parse, normalize, sort and select publications from bib_path.

    Never raises for an unreadable file or a parser failure; both give [].
    """
    try:
        text = load_bibliography(bib_path)
    except (OSError, UnicodeDecodeError) as e:
        print(f"  ⚠ Warning: Could not read bibliography {bib_path}: {e}")
        return []

    entries = parse_bibliography(text)
    publications = [normalize_entry(key, raw) for key, raw in entries.items()]
    return select_publications(sort_by_year(publications), selected_keys, max_items)
