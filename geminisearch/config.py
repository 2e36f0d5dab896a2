import os

API_KEY_ENV_VARS = ("GOOGLE_GENAI_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")
MIN_API_KEY_LENGTH = 10

DEFAULT_MODEL = "gemini-2.5-flash"
MODELS: dict[str, str] = {
    "gemini-2.5-flash": "Gemini 2.5 Flash (Recommended)",
    "gemini-2.5-pro": "Gemini 2.5 Pro",
    "gemini-2.5-flash-lite": "Gemini 2.5 Flash-Lite",
    "gemini-2.0-flash": "Gemini 2.0 Flash",
    "gemini-1.5-pro": "Gemini 1.5 Pro",
    "gemini-1.5-flash": "Gemini 1.5 Flash",
}


def resolve_api_key() -> str | None:
    """Return the first API key found in the environment."""
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


def validate_api_key(key: str) -> str:
    key = key.strip()
    if len(key) < MIN_API_KEY_LENGTH:
        raise ValueError(
            "API key appears to be too short. Please enter a valid key."
        )
    return key


def configured_model(model: str | None = None) -> str | None:
    """Model from the option or ``GEMINISEARCH_MODEL``, if either is set."""
    return model or os.environ.get("GEMINISEARCH_MODEL") or None


def resolve_model(model: str | None = None) -> str:
    return configured_model(model) or DEFAULT_MODEL


def resolve_redirects_enabled(flag: bool = False) -> bool:
    if flag:
        return True
    return os.environ.get("GEMINISEARCH_RESOLVE_REDIRECTS", "").lower() in (
        "1",
        "true",
        "yes",
    )
