"""Scraper output loading and batch reconstruction.

Reads the per-person JSON files written by the scraper, derives the person
record (slug, labels, summary) and reconstructs the editorial summary tree.
Files are processed with bounded thread concurrency; every reconstruction
uses its own identifier allocator.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote

from pydantic import BaseModel, Field, field_validator

from summarytree.config import settings
from summarytree.exceptions import MissingExpectedDataError
from summarytree.models import DanglingPolicy, Document, Piece
from summarytree.reconstruct import reconstruct_document

logger = logging.getLogger(__name__)

WIKIPEDIA_PREFIX = "https://en.wikipedia.org/wiki/"

# Escapes of ; / ? : @ & = + $ , #, which URI decoding leaves encoded
RESERVED_ESCAPE = re.compile(r"%(?:2[346bcf]|3[abdf]|40)", re.IGNORECASE)


class WikipediaData(BaseModel):
    """Subset of the Wikipedia lookup attached to a scraper result."""

    url: str
    title: str

    class Config:
        extra = "ignore"


class ScraperResult(BaseModel):
    """One scraper output file."""

    wikipedia_data: Optional[WikipediaData] = Field(None, alias="wikipediaData")
    tags: list[str] = Field(default_factory=list)

    # Present only for results with editorial content
    author: Optional[str] = None
    last_updated_on: Optional[datetime] = Field(None, alias="lastUpdatedOn")
    religion: Optional[str] = None
    political_views: Optional[str] = Field(None, alias="politicalViews")
    content: Optional[list[Piece]] = None

    class Config:
        populate_by_name = True
        extra = "ignore"

    @field_validator("last_updated_on", mode="before")
    @classmethod
    def _empty_date_is_none(cls, value):
        return value or None

    @property
    def has_content(self) -> bool:
        """Check if the scraper found an editorial summary."""
        return self.content is not None


class PersonRecord(BaseModel):
    """Notable person fields derived from a scraper result."""

    name: str
    slug: str
    old_slug: str
    labels: list[str] = Field(default_factory=list)
    summary: Optional[str] = None
    added_on: Optional[datetime] = None
    photo_id: Optional[str] = None


@dataclass
class ImportedSummary:
    """Reconstruction output for one scraper file."""

    path: Path
    slug: str
    person: PersonRecord
    document: Optional[Document] = None


def load_scraper_result(path: Union[str, Path]) -> ScraperResult:
    """Parse one scraper JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scraper result not found: {path}")
    return ScraperResult.model_validate_json(path.read_text(encoding="utf-8"))


def decode_uri(value: str) -> str:
    """Percent-decode a full URI, keeping reserved-character escapes.

    Reserved characters are single ASCII bytes, so splitting around their
    escapes never cuts a multi-byte UTF-8 sequence.
    """
    parts = []
    last = 0
    for match in RESERVED_ESCAPE.finditer(value):
        parts.append(unquote(value[last : match.start()]))
        parts.append(match.group())
        last = match.end()
    parts.append(unquote(value[last:]))
    return "".join(parts)


def wikipedia_slug(url: str) -> str:
    """Derive the person slug from a Wikipedia article URL."""
    return decode_uri(url).replace(WIKIPEDIA_PREFIX, "", 1)


def require_wikipedia_data(result: ScraperResult) -> WikipediaData:
    if result.wikipedia_data is None:
        raise MissingExpectedDataError("Expected object to have Wikipedia data.")
    return result.wikipedia_data


def normalize_labels(tags: list[str]) -> list[str]:
    """Lower-case tags and drop duplicates, keeping first-seen order."""
    return list(dict.fromkeys(tag.lower() for tag in tags))


def find_photo(slug: str, images_dir: Union[str, Path, None]) -> Optional[str]:
    """Return the file name of the first image named after ``slug``."""
    if images_dir is None:
        return None
    images_dir = Path(images_dir)
    if not images_dir.is_dir():
        return None
    prefix = f"{slug}."
    matches = sorted(
        p.name for p in images_dir.iterdir() if p.name.startswith(prefix) and p.is_file()
    )
    return matches[0] if matches else None


def build_person_record(
    result: ScraperResult,
    path: Union[str, Path],
    images_dir: Union[str, Path, None] = None,
) -> PersonRecord:
    """Derive the notable person record for a scraper result.

    Args:
        result: Parsed scraper output.
        path: File the result was read from (its stem is the old slug).
        images_dir: Directory of scraped photos to match against the slug.

    Returns:
        PersonRecord
    """
    wikipedia = require_wikipedia_data(result)
    slug = wikipedia_slug(wikipedia.url)

    record = PersonRecord(
        name=wikipedia.title,
        slug=slug,
        old_slug=Path(path).stem,
        labels=normalize_labels(result.tags),
        photo_id=find_photo(slug, images_dir),
    )

    if result.has_content:
        summary = [s for s in (result.religion, result.political_views) if s]
        record.summary = "\n".join(summary) if summary else None
        record.added_on = result.last_updated_on

    return record


def build_editorial_summary(
    result: ScraperResult,
    dangling_policy: Union[DanglingPolicy, str, None] = None,
) -> Optional[Document]:
    """Reconstruct the editorial summary tree of a scraper result.

    Returns:
        Document, or None if the scraper found no editorial content.

    Raises:
        MissingExpectedDataError: No Wikipedia data, or content without author.
    """
    require_wikipedia_data(result)
    if not result.has_content:
        return None
    if not result.author:
        raise MissingExpectedDataError("Expected editorial summary to have an author.")

    return reconstruct_document(
        result.content,
        author=result.author,
        last_updated_on=result.last_updated_on,
        dangling_policy=dangling_policy,
    )


def import_file(
    path: Union[str, Path],
    images_dir: Union[str, Path, None] = None,
    dangling_policy: Union[DanglingPolicy, str, None] = None,
) -> ImportedSummary:
    """Load one scraper file and reconstruct everything derived from it."""
    path = Path(path)
    result = load_scraper_result(path)
    person = build_person_record(result, path, images_dir)
    document = build_editorial_summary(result, dangling_policy)

    logger.debug(
        "Imported %s: %s nodes",
        person.slug,
        document.node_count if document else "no",
    )
    return ImportedSummary(path=path, slug=person.slug, person=person, document=document)


def import_directory(
    directory: Union[str, Path, None] = None,
    pattern: Optional[str] = None,
    concurrency: Optional[int] = None,
    images_dir: Union[str, Path, None] = None,
    dangling_policy: Union[DanglingPolicy, str, None] = None,
) -> list[ImportedSummary]:
    """Import every scraper file in a directory.

    Args:
        directory: Directory of scraper results (default from settings).
        pattern: Glob pattern for result files (default from settings).
        concurrency: Maximum files processed at once (default from settings).
        images_dir: Directory of scraped photos.
        dangling_policy: How to treat unplaced pieces.

    Returns:
        ImportedSummary per file, in sorted file order.
    """
    directory = Path(directory or settings.scraper_results_dir)
    pattern = pattern or settings.scraper_results_pattern
    concurrency = concurrency or settings.import_concurrency

    if not directory.is_dir():
        raise FileNotFoundError(f"Scraper results directory not found: {directory}")

    files = sorted(directory.glob(pattern))
    logger.info("Importing %d scraper result(s) from %s", len(files), directory)

    with ThreadPoolExecutor(max_workers=concurrency) as executor:
        imported = list(
            executor.map(
                lambda f: import_file(f, images_dir, dangling_policy),
                files,
            )
        )

    with_content = sum(1 for i in imported if i.document is not None)
    logger.info(
        "Reconstructed %d editorial summaries from %d file(s)",
        with_content,
        len(imported),
    )
    return imported
