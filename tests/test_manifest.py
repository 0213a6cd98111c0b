"""
Tests for book manifest parsing.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


BOOK_PAGE = """
<html>
<head><title>Some Book</title>
<script src="/js/reader.js"></script>
</head>
<body>
<div id="reader"></div>
<script type="text/javascript">
    var bookId = "5f1c0a2e-book";
    var pages = [
        "p001.jpg" ,
        "p002.jpg" ,
        "p003.jpg"
    ];
    var pageIds = [
        "a1",
        "a2",
        "a3"
    ];
    var totalPages = 3;
</script>
</body>
</html>
"""


class TestParseBookPage:
    """Test extraction of the embedded page lists."""

    def test_parses_all_fields(self):
        from ebook_recon.utils.manifest import parse_book_page

        manifest = parse_book_page(BOOK_PAGE)

        assert manifest.book_id == "5f1c0a2e-book"
        assert manifest.page_image_refs == ["p001.jpg", "p002.jpg", "p003.jpg"]
        assert manifest.page_metadata_ids == ["a1", "a2", "a3"]
        assert manifest.page_count == 3

    def test_pages_not_confused_with_page_ids(self):
        """'var pages' must not match 'var pageIds' and vice versa."""
        from ebook_recon.utils.manifest import parse_book_page

        html = BOOK_PAGE.replace('var pages = [', 'var pagesCount = 3;\n    var pages = [')
        manifest = parse_book_page(html)

        assert manifest.page_image_refs[0] == "p001.jpg"

    def test_missing_variable(self):
        from ebook_recon.errors import ManifestMalformed
        from ebook_recon.utils.manifest import parse_book_page

        with pytest.raises(ManifestMalformed, match="Invalid url"):
            parse_book_page(BOOK_PAGE.replace("var pageIds", "var somethingElse"))

    def test_variables_outside_script_ignored(self):
        from ebook_recon.errors import ManifestMalformed
        from ebook_recon.utils.manifest import parse_book_page

        html = '<html><body><p>var bookId = "x"; var pages = ["a"]; var pageIds = ["b"];</p></body></html>'

        with pytest.raises(ManifestMalformed):
            parse_book_page(html)

    def test_mismatched_lengths(self):
        from ebook_recon.errors import ManifestMalformed
        from ebook_recon.utils.manifest import parse_book_page

        with pytest.raises(ManifestMalformed):
            parse_book_page(BOOK_PAGE.replace('"a3"', '"a3", "a4"'))

    def test_unreadable_literal(self):
        from ebook_recon.errors import ManifestMalformed
        from ebook_recon.utils.manifest import parse_book_page

        with pytest.raises(ManifestMalformed):
            parse_book_page(BOOK_PAGE.replace('"p003.jpg"', "p003.jpg"))


class TestBookManifest:
    """Test manifest shape checks."""

    def test_empty_book_rejected(self):
        from ebook_recon.errors import ManifestMalformed
        from ebook_recon.utils.manifest import BookManifest

        with pytest.raises(ManifestMalformed):
            BookManifest("id", [], [])

    def test_non_string_entries_rejected(self):
        from ebook_recon.errors import ManifestMalformed
        from ebook_recon.utils.manifest import BookManifest

        with pytest.raises(ManifestMalformed):
            BookManifest("id", ["a", 2], ["x", "y"])

    def test_tuples_normalized_to_lists(self):
        from ebook_recon.utils.manifest import BookManifest

        manifest = BookManifest("id", ("a", "b"), ("x", "y"))

        assert manifest.page_image_refs == ["a", "b"]
        assert manifest.page_metadata_ids == ["x", "y"]
