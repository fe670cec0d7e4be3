"""URL helpers for OpenAI-compatible endpoints."""

CHAT_COMPLETIONS_PATH = "/chat/completions"
MODELS_PATH = "/models"


def derive_models_url(chat_completions_url: str) -> str:
    """Derive the models-listing URL from a chat-completions URL.

    `https://host/v1/chat/completions` becomes `https://host/v1/models`. A
    doubled `/v1/v1` left by a base URL that already ended in `/v1` is
    collapsed. URLs without a chat-completions path come back unchanged.
    """
    models_url = chat_completions_url.replace(CHAT_COMPLETIONS_PATH, MODELS_PATH, 1)
    return models_url.replace("/v1/v1", "/v1", 1)
