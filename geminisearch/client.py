import logging
from typing import Any

from google import genai
from google.genai import types

from geminisearch.citations import add_citations, list_search_queries, list_sources
from geminisearch.config import DEFAULT_MODEL
from geminisearch.models import GroundedResponse, SearchResult

logger = logging.getLogger(__name__)


class NoResponseError(RuntimeError):
    """The model returned no candidates."""


def build_search_result(
    question: str,
    model: str,
    response: GroundedResponse,
) -> SearchResult:
    """Annotate a grounded response and collect its sources and queries.

    Responses without grounding metadata come back with the original
    text, no sources and no queries.
    """
    if response.grounding_metadata is None:
        logger.debug("Response from %s is not grounded", model)
        return SearchResult(
            question=question,
            model=model,
            original_text=response.text,
            text_with_citations=response.text,
        )

    result = SearchResult(
        question=question,
        model=model,
        original_text=response.text,
        text_with_citations=add_citations(response),
        grounded=True,
        search_queries=list_search_queries(response),
        sources=list_sources(response),
    )
    logger.debug(
        "Grounded response: %d sources, %d queries",
        len(result.sources),
        len(result.search_queries),
    )
    return result


class GeminiSearch:
    """Gemini client with Google Search grounding enabled."""

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        client: Any = None,
    ) -> None:
        if not api_key:
            raise ValueError("API key is required")
        self.model = model
        self._client = client or genai.Client(api_key=api_key)

    def generate(self, question: str, model: str | None = None) -> GroundedResponse:
        """Run a grounded ``generate_content`` call.

        Raises:
            NoResponseError: If the model returned no candidates.
        """
        model = model or self.model
        logger.info("Asking %s: %r", model, question)
        response = self._client.models.generate_content(
            model=model,
            contents=question,
            config=types.GenerateContentConfig(
                tools=[types.Tool(google_search=types.GoogleSearch())],
            ),
        )
        if not response.candidates:
            raise NoResponseError("No response received.")
        return GroundedResponse.from_genai(response)

    def ask(self, question: str, model: str | None = None) -> SearchResult:
        """Ask a question and annotate the answer with its grounding sources.

        Args:
            question: The user question.
            model: Model override; defaults to the client's model.
        """
        model = model or self.model
        return build_search_result(question, model, self.generate(question, model))
