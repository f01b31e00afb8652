"""Tests for scraper output loading and batch import."""

import json
from datetime import datetime, timezone

import pytest

from summarytree.exceptions import MissingExpectedDataError
from summarytree.loader import (
    WIKIPEDIA_PREFIX,
    ScraperResult,
    build_editorial_summary,
    build_person_record,
    decode_uri,
    find_photo,
    import_directory,
    import_file,
    load_scraper_result,
    normalize_labels,
    wikipedia_slug,
)


class TestWikipediaSlug:
    """Tests for slug derivation."""

    def test_strips_prefix_and_decodes(self):
        """The article path is URL-decoded."""
        url = "https://en.wikipedia.org/wiki/Jane_Doe_%28writer%29"
        assert wikipedia_slug(url) == "Jane_Doe_(writer)"

    def test_plain_slug(self):
        assert wikipedia_slug("https://en.wikipedia.org/wiki/John_Roe") == "John_Roe"

    def test_reserved_escapes_stay_encoded(self):
        """Escapes of reserved URI characters are not decoded."""
        assert wikipedia_slug("https://en.wikipedia.org/wiki/AC%2FDC") == "AC%2FDC"
        assert wikipedia_slug("https://en.wikipedia.org/wiki/Who%3F") == "Who%3F"
        assert wikipedia_slug("https://en.wikipedia.org/wiki/A%26b%2c_c") == "A%26b%2c_c"

    def test_multibyte_escapes_decoded(self):
        """Non-reserved UTF-8 escapes next to reserved ones are decoded."""
        url = "https://en.wikipedia.org/wiki/Bj%C3%B6rk%2FSugarcubes"
        assert wikipedia_slug(url) == "Bj\u00f6rk%2FSugarcubes"

    def test_only_leading_prefix_removed(self):
        """A second copy of the prefix inside the path is kept."""
        url = WIKIPEDIA_PREFIX + "X_" + WIKIPEDIA_PREFIX
        assert wikipedia_slug(url) == "X_" + WIKIPEDIA_PREFIX

    def test_decode_uri(self):
        assert decode_uri("a%20b%23c%2Fd") == "a b%23c%2Fd"


class TestScraperResult:
    """Tests for ScraperResult parsing."""

    def test_parse_with_content(self, scraper_result):
        """Content pieces and metadata are parsed."""
        result = ScraperResult.model_validate(scraper_result)

        assert result.has_content
        assert len(result.content) == 7
        assert result.author == "Editorial Team"
        assert result.last_updated_on == datetime(2018, 3, 22, tzinfo=timezone.utc)

    def test_parse_without_content(self):
        """Results without editorial content have no pieces."""
        result = ScraperResult.model_validate({"tags": []})

        assert not result.has_content
        assert result.wikipedia_data is None

    def test_empty_date_is_none(self, scraper_result):
        scraper_result["lastUpdatedOn"] = ""
        result = ScraperResult.model_validate(scraper_result)
        assert result.last_updated_on is None

    def test_load_missing_file(self, tmp_path):
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_scraper_result(tmp_path / "nope.json")


class TestBuildEditorialSummary:
    """Tests for editorial summary reconstruction from results."""

    def test_builds_document(self, scraper_result):
        """A result with content yields a reconstructed Document."""
        document = build_editorial_summary(ScraperResult.model_validate(scraper_result))

        assert document.author == "Editorial Team"
        assert [n.type for n in document.nodes] == ["heading", "paragraph"]
        assert document.node_count == 7

    def test_requires_wikipedia_data(self, scraper_result):
        """Results without Wikipedia data are rejected before reconstruction."""
        del scraper_result["wikipediaData"]

        with pytest.raises(MissingExpectedDataError, match="Wikipedia data"):
            build_editorial_summary(ScraperResult.model_validate(scraper_result))

    def test_requires_author(self, scraper_result):
        """Content without an author is rejected."""
        del scraper_result["author"]

        with pytest.raises(MissingExpectedDataError, match="author"):
            build_editorial_summary(ScraperResult.model_validate(scraper_result))

    def test_no_content_returns_none(self, scraper_result):
        del scraper_result["content"]
        assert build_editorial_summary(ScraperResult.model_validate(scraper_result)) is None


class TestPersonRecord:
    """Tests for person record derivation."""

    def test_record_fields(self, scraper_result, tmp_path):
        """Slug, labels and summary come from the scraper result."""
        result = ScraperResult.model_validate(scraper_result)
        record = build_person_record(result, tmp_path / "jane-doe.json")

        assert record.name == "Jane Doe (writer)"
        assert record.slug == "Jane_Doe_(writer)"
        assert record.old_slug == "jane-doe"
        assert record.labels == ["writer", "american"]
        assert record.summary == "Catholic\nDemocrat"
        assert record.added_on == datetime(2018, 3, 22, tzinfo=timezone.utc)
        assert record.photo_id is None

    def test_summary_without_views(self, scraper_result, tmp_path):
        """No religion or political views means no summary."""
        del scraper_result["religion"]
        del scraper_result["politicalViews"]
        result = ScraperResult.model_validate(scraper_result)

        assert build_person_record(result, tmp_path / "x.json").summary is None

    def test_photo_match(self, scraper_result, tmp_path):
        """The first image named after the slug is used."""
        images = tmp_path / "images"
        images.mkdir()
        (images / "Jane_Doe_(writer).png").write_bytes(b"")
        (images / "Jane_Doe_(writer).jpg").write_bytes(b"")
        (images / "Other.jpg").write_bytes(b"")

        result = ScraperResult.model_validate(scraper_result)
        record = build_person_record(result, tmp_path / "x.json", images)

        assert record.photo_id == "Jane_Doe_(writer).jpg"

    def test_photo_match_reserved_slug(self, tmp_path):
        """Slugs with encoded slashes match files in the images directory."""
        images = tmp_path / "images"
        images.mkdir()
        (images / "AC%2FDC.jpg").write_bytes(b"")
        (images / "AC.jpg").write_bytes(b"")

        assert find_photo("AC%2FDC", images) == "AC%2FDC.jpg"

    def test_find_photo_missing_dir(self, tmp_path):
        assert find_photo("x", tmp_path / "missing") is None

    def test_normalize_labels(self):
        """Labels are lower-cased and de-duplicated in order."""
        assert normalize_labels(["B", "a", "b", "A"]) == ["b", "a"]


class TestImport:
    """Tests for file and directory import."""

    def test_import_file(self, results_dir):
        """One file produces a person record and a document."""
        imported = import_file(results_dir / "jane-doe.json")

        assert imported.slug == "Jane_Doe_(writer)"
        assert imported.document.node_count == 7

    def test_import_directory(self, results_dir):
        """Every file is imported, in sorted order."""
        imported = import_directory(results_dir, pattern="*.json", concurrency=2)

        assert [i.slug for i in imported] == ["Jane_Doe_(writer)", "John_Roe"]
        assert imported[0].document is not None
        assert imported[1].document is None

    def test_each_file_gets_own_identifiers(self, results_dir, scraper_result):
        """Identical content in two files never shares node ids."""
        (results_dir / "jane-copy.json").write_text(json.dumps(scraper_result))
        imported = import_directory(results_dir, concurrency=4)
        documents = [i.document for i in imported if i.document]

        assert len(documents) == 2
        first, second = ({n.id for n in d.walk()} for d in documents)
        assert first.isdisjoint(second)

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            import_directory(tmp_path / "missing")

    def test_missing_wikipedia_data_propagates(self, results_dir):
        """Malformed files fail the import instead of being skipped."""
        (results_dir / "broken.json").write_text(json.dumps({"tags": []}))

        with pytest.raises(MissingExpectedDataError):
            import_directory(results_dir)
