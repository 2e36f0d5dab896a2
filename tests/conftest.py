import logging
from typing import Any

import pytest
from google.genai import types
from payloads import REDIRECT_URI, make_payload, support, web_chunk

from geminisearch.config import API_KEY_ENV_VARS
from geminisearch.models import GroundedResponse

logging.getLogger("httpx").setLevel(logging.WARNING)


@pytest.fixture
def abcde_payload() -> dict[str, Any]:
    return make_payload(
        supports=[support(2, 0), support(4, 1)],
        chunks=[web_chunk("u0", "T0"), web_chunk("u1", "T1")],
        queries=["what is abcde", "abcde meaning"],
    )


@pytest.fixture
def abcde_response(abcde_payload: dict[str, Any]) -> GroundedResponse:
    return GroundedResponse.model_validate(abcde_payload)


@pytest.fixture
def genai_response() -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(
                    role="model",
                    parts=[types.Part(text="Paris is the capital of France.")],
                ),
                grounding_metadata=types.GroundingMetadata(
                    web_search_queries=["capital of france"],
                    grounding_chunks=[
                        types.GroundingChunk(
                            web=types.GroundingChunkWeb(
                                uri=REDIRECT_URI, title="wikipedia.org"
                            )
                        ),
                    ],
                    grounding_supports=[
                        types.GroundingSupport(
                            segment=types.Segment(
                                start_index=0,
                                end_index=30,
                                text="Paris is the capital of France",
                            ),
                            grounding_chunk_indices=[0],
                        ),
                    ],
                ),
            )
        ]
    )


@pytest.fixture
def no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in API_KEY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
