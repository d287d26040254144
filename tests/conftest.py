"""Pytest configuration and fixtures."""
from pathlib import Path

import pytest

from personal_site.bibliography import Note, Publication


SAMPLE_BIB = """
@article{smith2019,
  title = {Older Work},
  author = {John Smith},
  journal = {Journal of Tests},
  year = {2019}
}

@inproceedings{doe2023,
  TITLE = {Newest Work},
  AUTHOR = {Jane Doe and John Smith and Ana Lopez},
  BOOKTITLE = {Proceedings of Testing},
  YEAR = {2023},
  PAGES = {1--10},
  PUBLISHER = {ACM},
  URL = {https://example.org/doe2023},
  NOTE1 = {Best Paper},
  NOTE1URL = {http://x},
  NOTE2 = {Code}
}

@misc{undated,
  title = {No Year Here},
  author = {Ana Lopez}
}

@article{doe2021,
  title = {Middle Work},
  author = {Jane Doe and John Smith},
  journal = {Journal of Tests},
  year = {2021},
  volume = {4},
  number = {2}
}
"""


@pytest.fixture
def sample_bib_text() -> str:
    return SAMPLE_BIB


@pytest.fixture
def bib_file(tmp_path) -> Path:
    """A bibliography file with four entries, one of them undated."""
    path = tmp_path / "references-data.bib"
    path.write_text(SAMPLE_BIB, encoding="utf-8")
    return path


@pytest.fixture
def empty_bib_file(tmp_path) -> Path:
    path = tmp_path / "empty.bib"
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture
def sample_publication() -> Publication:
    return Publication(
        key="doe2023",
        title="Newest Work",
        authors="Jane Doe and John Smith",
        journal="Proceedings of Testing",
        year=2023,
        url="https://example.org/doe2023",
        notes=(Note("Best Paper", "http://x"), Note("Code")),
        pages="1--10",
        volume="4",
        number="2",
        publisher="ACM",
        entry_type="inproceedings",
    )
