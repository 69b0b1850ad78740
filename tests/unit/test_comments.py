"""Unit tests for documentation comment extraction."""

from __future__ import annotations

import pytest

from jsondoclet.comments import EMPTY_COMMENT, CommentExtractor, parse_doc_comment
from jsondoclet.errors import MalformedCommentWarning


class TestParseDocComment:
    """Tests for parse_doc_comment()."""

    def test_blank_text_is_empty(self) -> None:
        """None and whitespace produce the shared empty comment."""
        assert parse_doc_comment(None) is EMPTY_COMMENT
        assert parse_doc_comment("   \n ") is EMPTY_COMMENT
        assert EMPTY_COMMENT.is_empty

    def test_plain_text_description(self) -> None:
        """Text without delimiters is taken as description."""
        doc = parse_doc_comment("Order identifier.")
        assert doc.description == "Order identifier."
        assert doc.tags == {}

    def test_strips_javadoc_gutter(self) -> None:
        """Delimiters and leading asterisks are removed."""
        doc = parse_doc_comment(
            """
            /**
             * Greets people
             * politely.
             */
            """
        )
        assert doc.description == "Greets people politely."

    def test_paragraphs_are_kept(self) -> None:
        """Blank lines separate paragraphs; summary is the first one."""
        doc = parse_doc_comment("/**\n * First.\n *\n * Second part.\n */")
        assert doc.description == "First.\n\nSecond part."
        assert doc.summary == "First."

    def test_block_tags_in_order(self) -> None:
        """Repeated tags accumulate bodies in source order."""
        doc = parse_doc_comment(
            "/**\n * Text.\n * @see A\n * @see B\n * @since 1.2\n */"
        )
        assert doc.description == "Text."
        assert doc.all("see") == ("A", "B")
        assert doc.first("since") == "1.2"
        assert doc.first("missing") is None

    def test_multiline_tag_body_joined(self) -> None:
        """Continuation lines are joined with single spaces."""
        doc = parse_doc_comment("/**\n * @deprecated use\n *   the new field\n */")
        assert doc.first("deprecated") == "use the new field"
        assert doc.is_deprecated

    def test_unknown_tags_preserved(self) -> None:
        """Tags with no schema meaning are kept under their literal name."""
        doc = parse_doc_comment("/** @custom-tag keep me */")
        assert doc.tags == {"custom-tag": ("keep me",)}

    def test_tag_without_body(self) -> None:
        """A bare tag records an empty body."""
        doc = parse_doc_comment("/** Old.\n * @deprecated\n */")
        assert doc.all("deprecated") == ("",)
        assert doc.is_deprecated

    def test_param_lookup(self) -> None:
        """param() finds the text of a named @param tag."""
        doc = parse_doc_comment("/**\n * @param <T> element type\n * @param name who\n */")
        assert doc.param("name") == "who"
        assert doc.param("<T>") == "element type"
        assert doc.param("other") is None

    def test_inline_tags_rendered(self) -> None:
        """Inline tags become plain text."""
        doc = parse_doc_comment(
            "Uses {@code Map} and {@link com.example.Order#id} or {@link Order the order}."
        )
        assert doc.description == "Uses Map and com.example.Order.id or the order."

    def test_inherit_doc_removed(self) -> None:
        """{@inheritDoc} renders as nothing."""
        assert parse_doc_comment("{@inheritDoc} More.").description == " More."

    def test_idempotent(self) -> None:
        """Parsing the same text twice gives equal comments."""
        text = "/**\n * Point.\n * @example {\"x\": 1}\n */"
        assert parse_doc_comment(text) == parse_doc_comment(text)


class TestMalformedComments:
    """Tests for broken tag syntax."""

    def test_malformed_tag_kept_in_description(self) -> None:
        """A marker with no tag name stays in the description and warns."""
        with pytest.warns(MalformedCommentWarning):
            doc = parse_doc_comment("/**\n * Summary.\n * @ 123 oops\n */")
        assert "@ 123 oops" in doc.description
        assert doc.problems

    def test_unclosed_inline_tag(self) -> None:
        """An unclosed inline tag is reported and left verbatim."""
        with pytest.warns(MalformedCommentWarning):
            doc = parse_doc_comment("See {@link Order")
        assert doc.description == "See {@link Order"
        assert len(doc.problems) == 1


class TestCommentExtractor:
    """Tests for the caching extractor."""

    def test_caches_by_text(self) -> None:
        """The same text yields the same DocComment instance."""
        extractor = CommentExtractor()
        first = extractor.extract("/** Cached. */")
        assert extractor.extract("/** Cached. */") is first

    def test_blank_text(self) -> None:
        """Blank text yields the empty comment."""
        assert CommentExtractor().extract(None) is EMPTY_COMMENT
