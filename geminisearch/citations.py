"""Inline citation markers, source and search-query listings for grounded responses."""

import logging

from rich.text import Text

from geminisearch.models import GroundedResponse, GroundingChunk, Source
from geminisearch.redirects import display_uri, site_name

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 30
UNKNOWN_SOURCE = "Unknown Source"


def _marker_label(chunk: GroundingChunk) -> str | None:
    if chunk.web is None or not chunk.web.uri:
        return None
    title = chunk.web.title or site_name(chunk.web.uri)
    if len(title) > MAX_TITLE_LENGTH:
        title = title[: MAX_TITLE_LENGTH - 3] + "..."
    return f"[{title}]"


def _insertions(response: GroundedResponse) -> list[tuple[int, str]]:
    """Compute ``(offset, markers)`` pairs, ordered by offset descending.

    Offsets refer to the original text. Splicing in the returned order
    never moves an offset that is still to be processed.
    """
    metadata = response.grounding_metadata
    if metadata is None:
        return []
    supports = metadata.grounding_supports
    chunks = metadata.grounding_chunks
    if not supports or not chunks:
        return []

    candidates = [
        support
        for support in supports
        if support.segment is not None
        and support.segment.end_index is not None
        and support.grounding_chunk_indices
    ]
    # sorted() is stable, so supports sharing an end index keep their order
    candidates = sorted(
        candidates,
        key=lambda s: s.segment.end_index,  # type: ignore[union-attr]
        reverse=True,
    )

    length = len(response.text)
    insertions: list[tuple[int, str]] = []
    for support in candidates:
        markers: list[str] = []
        for i in support.grounding_chunk_indices or []:
            if not 0 <= i < len(chunks):
                logger.debug("Skipping out-of-range grounding chunk index %d", i)
                continue
            label = _marker_label(chunks[i])
            if label is None:
                logger.debug("Skipping grounding chunk %d without a web source", i)
                continue
            markers.append(label)
        if not markers:
            continue
        end = min(max(support.segment.end_index, 0), length)  # type: ignore[union-attr]
        insertions.append((end, ", ".join(markers)))
    return insertions


def add_citations(response: GroundedResponse) -> str:
    """Return the response text with citation markers inlined.

    Each grounding support with at least one resolvable web chunk gets
    its markers inserted immediately before ``segment.end_index``.
    Without grounding metadata the text is returned unchanged.
    """
    text = response.text
    for end, markers in _insertions(response):
        text = text[:end] + markers + text[end:]
    return text


def render_citations(response: GroundedResponse, style: str = "blue") -> Text:
    """Like :func:`add_citations`, as rich ``Text`` with styled markers."""
    text = Text()
    cursor = 0
    for end, markers in reversed(_insertions(response)):
        text.append(response.text[cursor:end])
        text.append(markers, style=style)
        cursor = end
    text.append(response.text[cursor:])
    return text


def list_sources(response: GroundedResponse) -> list[Source]:
    """List web sources with their 1-based position in the chunk list.

    Chunks without a web source are skipped and the remaining ones keep
    their original position, so numbering may have gaps.
    """
    metadata = response.grounding_metadata
    if metadata is None or not metadata.grounding_chunks:
        return []
    return [
        Source(
            index=position,
            title=chunk.web.title or UNKNOWN_SOURCE,
            uri=chunk.web.uri or "",
        )
        for position, chunk in enumerate(metadata.grounding_chunks, start=1)
        if chunk.web is not None
    ]


def list_search_queries(response: GroundedResponse) -> list[str]:
    metadata = response.grounding_metadata
    if metadata is None or metadata.web_search_queries is None:
        return []
    return list(metadata.web_search_queries)


def format_sources(sources: list[Source]) -> str:
    if not sources:
        return ""
    lines = ["--- Sources ---"]
    for source in sources:
        lines.append(f"{source.index}. {source.title}")
        lines.append(f"   {display_uri(source.uri)}")
        lines.append("")
    return "\n".join(lines)


def format_search_queries(queries: list[str]) -> str:
    if not queries:
        return ""
    lines = ["--- Search Queries ---"]
    for n, query in enumerate(queries, start=1):
        lines.append(f'{n}. "{query}"')
    return "\n".join(lines)
