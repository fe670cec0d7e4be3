"""Provider gateway: transport, request assembly, stream decoding, diagnostics."""

from chatdesk.core.gateway.client import ProviderGateway, extract_content, normalize_models
from chatdesk.core.gateway.endpoints import derive_models_url
from chatdesk.core.gateway.error_classifier import Diagnostic, classify, describe
from chatdesk.core.gateway.request_builder import PreparedRequest, build_chat_request
from chatdesk.core.gateway.results import (
    ConnectionTestResult,
    ModelListResult,
    SendResult,
    StreamResult,
)
from chatdesk.core.gateway.stream_decoder import (
    SseDeltaDecoder,
    StreamEvent,
    StreamEventType,
    decode_stream,
)
from chatdesk.core.gateway.transport import TransportDescriptor, build_transport

__all__ = [
    "ConnectionTestResult",
    "Diagnostic",
    "ModelListResult",
    "PreparedRequest",
    "ProviderGateway",
    "SendResult",
    "SseDeltaDecoder",
    "StreamEvent",
    "StreamEventType",
    "StreamResult",
    "TransportDescriptor",
    "build_chat_request",
    "build_transport",
    "classify",
    "decode_stream",
    "derive_models_url",
    "describe",
    "extract_content",
    "normalize_models",
]
