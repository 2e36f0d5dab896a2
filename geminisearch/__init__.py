from geminisearch.citations import (
    add_citations,
    format_search_queries,
    format_sources,
    list_search_queries,
    list_sources,
    render_citations,
)
from geminisearch.client import GeminiSearch, NoResponseError, build_search_result
from geminisearch.models import (
    GroundedResponse,
    SearchResult,
    Source,
)
