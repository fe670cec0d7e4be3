"""chatdesk

A client for OpenAI-compatible chat-completion providers: stored provider
configurations, buffered and streamed chat, connection diagnostics.
"""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("chatdesk")
except PackageNotFoundError:
    # Fallback for source checkouts
    __version__ = "0.1.0"
__author__ = "chatdesk"
