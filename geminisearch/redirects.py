"""Display and resolution of Google grounding redirect URIs."""

import logging
from urllib.parse import parse_qs, urlparse

import httpx

from geminisearch.models import Source

logger = logging.getLogger(__name__)

REDIRECT_PREFIX = "https://vertexaisearch.cloud.google.com/grounding-api-redirect/"
REDIRECT_PLACEHOLDER = "[Google Search Result]"


def is_grounding_redirect(uri: str) -> bool:
    return uri.startswith(REDIRECT_PREFIX)


def site_name(uri: str) -> str:
    """Short human-readable site name for a URI.

    ``https://www.example.com/page`` becomes ``Example``. Redirect URIs
    and anything without a host fall back to ``Source``.
    """
    if is_grounding_redirect(uri):
        return "Source"
    try:
        host = urlparse(uri).hostname
    except ValueError:
        return "Source"
    if not host:
        return "Source"
    host = host.removeprefix("www.")
    parts = host.split(".")
    if len(parts) >= 2:
        return parts[0].capitalize()
    return host


def display_uri(uri: str) -> str:
    """URI as shown in the source list."""
    if not is_grounding_redirect(uri):
        return uri
    target = parse_qs(urlparse(uri).query).get("url")
    if target:
        return target[0]
    return REDIRECT_PLACEHOLDER


def resolve_redirect(
    uri: str,
    client: httpx.Client | None = None,
    timeout: float = 10.0,
) -> str:
    """Return the target of a grounding redirect URI.

    Non-redirect URIs are returned unchanged. On any HTTP error the
    original URI is returned.
    """
    if not is_grounding_redirect(uri):
        return uri

    owns_client = client is None
    http = client or httpx.Client(timeout=timeout)
    try:
        response = http.head(uri, follow_redirects=False)
        if response.status_code == 405:
            response = http.get(uri, follow_redirects=False)
        location = response.headers.get("location")
        if response.is_redirect and location:
            return location
        logger.warning(
            "Redirect %s did not resolve (status %s)", uri, response.status_code
        )
        return uri
    except httpx.HTTPError as e:
        logger.warning("Could not resolve redirect %s: %s", uri, e)
        return uri
    finally:
        if owns_client:
            http.close()


def resolve_sources(
    sources: list[Source],
    client: httpx.Client | None = None,
) -> list[Source]:
    """Resolve the redirect URI of every source, sharing one HTTP client."""
    if client is not None:
        return [
            source.model_copy(update={"uri": resolve_redirect(source.uri, client)})
            for source in sources
        ]
    with httpx.Client(timeout=10.0) as http:
        return [
            source.model_copy(update={"uri": resolve_redirect(source.uri, http)})
            for source in sources
        ]
