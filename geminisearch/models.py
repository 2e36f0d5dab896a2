from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ResponseModel(BaseModel):
    """Base for the upstream response schema.

    Accepts both the REST API's camelCase keys and the snake_case keys
    produced by ``model_dump()`` on google-genai types.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class WebSource(_ResponseModel):
    uri: str | None = None
    title: str | None = None


class GroundingChunk(_ResponseModel):
    web: WebSource | None = None


class Segment(_ResponseModel):
    start_index: int | None = None
    end_index: int | None = None
    text: str | None = None


class GroundingSupport(_ResponseModel):
    segment: Segment | None = None
    grounding_chunk_indices: list[int] | None = None


class GroundingMetadata(_ResponseModel):
    grounding_supports: list[GroundingSupport] | None = None
    grounding_chunks: list[GroundingChunk] | None = None
    web_search_queries: list[str] | None = None


class Candidate(_ResponseModel):
    grounding_metadata: GroundingMetadata | None = None


class GroundedResponse(_ResponseModel):
    text: str
    candidates: list[Candidate] = Field(default_factory=list)

    @property
    def grounding_metadata(self) -> GroundingMetadata | None:
        if not self.candidates:
            return None
        return self.candidates[0].grounding_metadata

    @classmethod
    def from_genai(cls, response: Any) -> "GroundedResponse":
        """Build from a google-genai ``GenerateContentResponse``."""
        candidates = [
            candidate.model_dump(exclude_none=True)
            for candidate in response.candidates or []
        ]
        return cls(text=response.text or "", candidates=candidates)


class Source(BaseModel):
    index: int
    title: str
    uri: str


class SearchResult(BaseModel):
    question: str
    model: str
    original_text: str
    text_with_citations: str
    grounded: bool = False
    search_queries: list[str] = Field(default_factory=list)
    sources: list[Source] = Field(default_factory=list)
