"""
Marker-delimited blocks inside host markdown files.

An index lives in the host file between two HTML comment lines::

    <!-- AGENTS-MD-EMBED-START:nextjs -->
    [Next.js Docs Index]|root: ./.agdex/nextjs|...
    <!-- AGENTS-MD-EMBED-END:nextjs -->

The identifier suffix is optional. Everything outside the block is treated
as opaque text and is preserved exactly. All functions here are pure string
transforms; reading and writing the host file is the caller's business.
"""

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_BLOCK_ID_RE = re.compile(r"^[^\s:]+$")
_BLANK_RUN_RE = re.compile(r"\n{3,}")


@dataclass(frozen=True)
class MarkerPair:
    """Start/end marker lines for one kind of embedded block.

    Attributes:
        tag: Marker tag, e.g. ``AGENTS-MD-EMBED``.
    """

    tag: str
    _start_pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        pattern = re.compile(r"<!-- " + re.escape(self.tag) + r"-START(?::(\S+?))? -->")
        object.__setattr__(self, "_start_pattern", pattern)

    def start(self, block_id: str | None = None) -> str:
        """Render the start marker line."""
        return f"<!-- {self.tag}-START{_suffix(block_id)} -->"

    def end(self, block_id: str | None = None) -> str:
        """Render the end marker line."""
        return f"<!-- {self.tag}-END{_suffix(block_id)} -->"

    def wrap(self, body: str, block_id: str | None = None) -> str:
        """Wrap a block body with its start and end markers."""
        return f"{self.start(block_id)}\n{body}\n{self.end(block_id)}"

    @property
    def start_pattern(self) -> re.Pattern[str]:
        """Regex matching any start marker of this tag; group 1 is the identifier."""
        return self._start_pattern


DOCS_MARKERS = MarkerPair("AGENTS-MD-EMBED")
SKILLS_MARKERS = MarkerPair("AGENTS-MD-SKILLS")


def _suffix(block_id: str | None) -> str:
    if not block_id:
        return ""
    if not _BLOCK_ID_RE.match(block_id):
        raise ValueError(f"Invalid block identifier: {block_id!r}")
    return f":{block_id}"


def _locate(content: str, markers: MarkerPair, block_id: str | None) -> tuple[int, int] | None:
    """Find the span of a block.

    Returns the start index and the index just past the end marker. When the
    end marker is missing, the span covers the start marker alone.
    """
    start_marker = markers.start(block_id)
    start_idx = content.find(start_marker)
    if start_idx == -1:
        return None

    end_marker = markers.end(block_id)
    end_idx = content.find(end_marker, start_idx + len(start_marker))
    if end_idx == -1:
        logger.debug("Start marker %s has no end marker", start_marker)
        return start_idx, start_idx + len(start_marker)

    return start_idx, end_idx + len(end_marker)


def has_block(content: str, markers: MarkerPair, block_id: str | None = None) -> bool:
    """Check whether content contains the start marker for a block.

    Args:
        content: Host file content.
        markers: Marker pair to look for.
        block_id: Optional block identifier.

    Returns:
        True if the start marker is present.
    """
    return markers.start(block_id) in content


def find_block_ids(content: str, markers: MarkerPair) -> list[str | None]:
    """List the identifiers of every block start marker in content.

    Unidentified blocks are reported as None.
    """
    return [match.group(1) for match in markers.start_pattern.finditer(content)]


def inject_block(
    content: str,
    body: str,
    markers: MarkerPair,
    block_id: str | None = None,
) -> str:
    """Insert or replace a block.

    An existing block with the same identifier is replaced in place and the
    text around it is kept verbatim. Otherwise the block is appended after a
    blank line, and the result ends with a single newline. Injecting the
    same body twice gives the same result as injecting it once.

    Args:
        content: Host file content (may be empty).
        body: Block body, without markers.
        markers: Marker pair for this kind of block.
        block_id: Optional block identifier.

    Returns:
        The new host file content.
    """
    wrapped = markers.wrap(body, block_id)

    span = _locate(content, markers, block_id)
    if span is not None:
        start_idx, end_idx = span
        return content[:start_idx] + wrapped + content[end_idx:]

    if not content:
        return wrapped + "\n"

    separator = "\n" if content.endswith("\n") else "\n\n"
    return content + separator + wrapped + "\n"


def remove_block(content: str, markers: MarkerPair, block_id: str | None = None) -> str:
    """Remove a block and tidy the surrounding whitespace.

    With an identifier only that block is removed. Without one, every block
    of this marker tag is removed regardless of identifier. A start marker
    without a matching end marker is stripped on its own.

    Content without any matching block is returned unchanged.

    Args:
        content: Host file content.
        markers: Marker pair for this kind of block.
        block_id: Optional block identifier.

    Returns:
        The new host file content.
    """
    if block_id:
        span = _locate(content, markers, block_id)
        if span is None:
            return content
        start_idx, end_idx = span
        result = content[:start_idx] + content[end_idx:]
    else:
        if markers.start_pattern.search(content) is None:
            return content
        result = _remove_all(content, markers)

    return _tidy(result)


def _remove_all(content: str, markers: MarkerPair) -> str:
    pieces: list[str] = []
    pos = 0

    while True:
        match = markers.start_pattern.search(content, pos)
        if match is None:
            pieces.append(content[pos:])
            break

        pieces.append(content[pos : match.start()])
        end_marker = markers.end(match.group(1))
        end_idx = content.find(end_marker, match.end())

        if end_idx == -1:
            logger.debug("Stripping dangling start marker %s", match.group(0))
            pos = match.end()
        else:
            pos = end_idx + len(end_marker)

    return "".join(pieces)


def _tidy(content: str) -> str:
    result = _BLANK_RUN_RE.sub("\n\n", content).rstrip()
    if result:
        result += "\n"
    return result
