"""Documentation comment extraction.

Parses raw documentation text (Javadoc-style ``/** ... */`` blocks or plain
text) into a DocComment: a description plus a mapping from block tag name
to the ordered list of tag bodies.

Parsing is purely textual. Every block tag is kept under its literal name,
whether or not it feeds a schema keyword. Broken tag syntax is reported as
MalformedCommentWarning and the offending text is kept in the description.
"""

from __future__ import annotations

import re
import warnings

import structlog
from pydantic import BaseModel, ConfigDict, Field

from jsondoclet.errors import MalformedCommentWarning

logger = structlog.get_logger(__name__)

# Block tags that feed schema keywords; every other tag is only preserved.
SCHEMA_TAGS = frozenset({"deprecated", "example", "default", "return"})

_BLOCK_TAG = re.compile(r"^@([A-Za-z][\w-]*)(?:\s+(.*))?$")
_INLINE_TAG = re.compile(r"\{@([A-Za-z]+)(?:\s+([^{}]*?))?\s*\}")


class DocComment(BaseModel):
    """Parsed documentation comment.

    Attributes:
        description: Text before the first block tag. Paragraphs are
            separated by a blank line.
        tags: Tag name to tag bodies, in source order.
        problems: Malformed-syntax findings, in source order.

    Example:
        >>> doc = parse_doc_comment("/** Order id.\\n * @deprecated use uuid */")
        >>> doc.description, doc.first("deprecated")
        ('Order id.', 'use uuid')
    """

    model_config = ConfigDict(frozen=True)

    description: str = ""
    tags: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    problems: tuple[str, ...] = ()

    @property
    def summary(self) -> str:
        """First paragraph of the description."""
        return self.description.split("\n\n", 1)[0]

    @property
    def is_empty(self) -> bool:
        return not self.description and not self.tags

    @property
    def is_deprecated(self) -> bool:
        return "deprecated" in self.tags

    def all(self, tag: str) -> tuple[str, ...]:
        """Return every body recorded for *tag*."""
        return self.tags.get(tag, ())

    def first(self, tag: str) -> str | None:
        """Return the first body recorded for *tag*, or None."""
        bodies = self.tags.get(tag)
        return bodies[0] if bodies else None

    def param(self, name: str) -> str | None:
        """Return the text of ``@param <name> text``, or None."""
        for body in self.all("param"):
            param_name, _, text = body.partition(" ")
            if param_name == name:
                return text.strip()
        return None


EMPTY_COMMENT = DocComment()


class CommentExtractor:
    """Parse documentation text, caching results per text.

    One extractor is used per generation run, so a comment shared by
    several members is parsed (and warned about) once.
    """

    def __init__(self) -> None:
        self._cache: dict[str, DocComment] = {}

    def extract(self, text: str | None) -> DocComment:
        """Return the DocComment for *text* (EMPTY_COMMENT when blank)."""
        if not text or not text.strip():
            return EMPTY_COMMENT
        cached = self._cache.get(text)
        if cached is None:
            cached = parse_doc_comment(text)
            self._cache[text] = cached
        return cached


def parse_doc_comment(text: str | None) -> DocComment:
    """Parse raw documentation text into a DocComment.

    Args:
        text: Raw comment text, with or without ``/** */`` delimiters.

    Returns:
        Parsed DocComment. Re-parsing the same text yields an equal value.

    Example:
        >>> doc = parse_doc_comment('''
        ...     /**
        ...      * Greets people.
        ...      *
        ...      * @param name person to greet
        ...      * @since 1.2
        ...      */''')
        >>> doc.param("name"), doc.tags["since"]
        ('person to greet', ('1.2',))
    """
    if not text or not text.strip():
        return EMPTY_COMMENT

    problems: list[str] = []
    paragraphs: list[list[str]] = [[]]
    tags: dict[str, list[str]] = {}
    tag_name: str | None = None
    tag_lines: list[str] = []

    def close_tag() -> None:
        nonlocal tag_name, tag_lines
        if tag_name is not None:
            body = " ".join(part for part in tag_lines if part)
            tags.setdefault(tag_name, []).append(_render_inline(body, problems))
        tag_name = None
        tag_lines = []

    for line in _clean_lines(text):
        if line.startswith("@"):
            match = _BLOCK_TAG.match(line)
            close_tag()
            if match:
                tag_name = match.group(1)
                tag_lines = [(match.group(2) or "").strip()]
                continue
            problems.append(f"malformed tag marker {line!r}")
            paragraphs.append([line])
            continue
        if tag_name is not None:
            tag_lines.append(line)
        elif line:
            paragraphs[-1].append(line)
        elif paragraphs[-1]:
            paragraphs.append([])
    close_tag()

    description = "\n\n".join(" ".join(lines) for lines in paragraphs if lines)
    comment = DocComment(
        description=_render_inline(description, problems),
        tags={name: tuple(bodies) for name, bodies in tags.items()},
        problems=tuple(problems),
    )

    for problem in comment.problems:
        logger.warning("malformed_comment", problem=problem)
        warnings.warn(MalformedCommentWarning(problem), stacklevel=2)

    return comment


def _clean_lines(text: str) -> list[str]:
    body = text.strip()
    javadoc = body.startswith("/*")
    if javadoc:
        body = body[3:] if body.startswith("/**") else body[2:]
        if body.endswith("*/"):
            body = body[:-2]

    lines: list[str] = []
    for raw in body.splitlines():
        line = raw.strip()
        if javadoc and line.startswith("*"):
            line = line[1:].strip()
        lines.append(line)
    return lines


def _render_inline(text: str, problems: list[str]) -> str:
    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        body = (match.group(2) or "").strip()
        if name in ("link", "linkplain"):
            target, _, label = body.partition(" ")
            return label.strip() or target.replace("#", ".").lstrip(".")
        if name == "inheritDoc":
            return ""
        return body or name

    rendered = _INLINE_TAG.sub(replace, text)
    if "{@" in rendered:
        problems.append(f"unclosed inline tag in {text!r}")
    return rendered
