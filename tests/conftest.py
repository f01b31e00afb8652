"""Pytest configuration and fixtures."""

import itertools
import json
from uuid import UUID

import pytest

from summarytree.models import parse_pieces


@pytest.fixture
def id_factory():
    """Deterministic identifier factory: UUID(int=1), UUID(int=2), ..."""
    counter = itertools.count(1)
    return lambda: UUID(int=next(counter))


@pytest.fixture
def raw_pieces():
    """Scraper pieces for a small summary with nested blocks."""
    return [
        {"id": 1, "kind": "block", "type": "heading"},
        {"id": 2, "kind": "inline", "parentId": 1, "type": "text", "text": "Religion"},
        {"id": 3, "kind": "block", "type": "paragraph"},
        {
            "id": 4,
            "kind": "inline",
            "parentId": 3,
            "type": "link",
            "text": "Raised Catholic",
            "sourceTitle": "Interview",
            "sourceUrl": "https://example.com/interview  \n",
        },
        {"id": 5, "kind": "block", "parentId": 3, "type": "quote"},
        {"id": 6, "kind": "inline", "parentId": 5, "type": "text", "text": "I pray."},
        {"id": 7, "kind": "inline", "parentId": 3, "type": "text", "text": " Later..."},
    ]


@pytest.fixture
def pieces(raw_pieces):
    """Validated pieces."""
    return parse_pieces(raw_pieces)


@pytest.fixture
def scraper_result(raw_pieces):
    """A scraper result with editorial content."""
    return {
        "wikipediaData": {
            "url": "https://en.wikipedia.org/wiki/Jane_Doe_%28writer%29",
            "title": "Jane Doe (writer)",
        },
        "tags": ["Writer", "American", "writer"],
        "author": "Editorial Team",
        "lastUpdatedOn": "2018-03-22T00:00:00Z",
        "religion": "Catholic",
        "politicalViews": "Democrat",
        "content": raw_pieces,
    }


@pytest.fixture
def results_dir(tmp_path, scraper_result):
    """Directory holding two scraper results, one without content."""
    out_dir = tmp_path / "scraperResults"
    out_dir.mkdir()
    (out_dir / "jane-doe.json").write_text(json.dumps(scraper_result))
    (out_dir / "john-roe.json").write_text(
        json.dumps(
            {
                "wikipediaData": {
                    "url": "https://en.wikipedia.org/wiki/John_Roe",
                    "title": "John Roe",
                },
                "tags": ["Actor"],
            }
        )
    )
    return out_dir
