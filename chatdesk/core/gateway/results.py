"""Result shapes returned to the UI layer.

Every operation resolves to one of these; failures carry the diagnostic
message instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from chatdesk.core.gateway.error_classifier import Diagnostic


@dataclass(frozen=True)
class SendResult:
    success: bool
    content: str | None = None
    raw: Any = None
    error: str | None = None
    diagnostic: Diagnostic | None = None

    @classmethod
    def ok(cls, content: str, raw: Any) -> SendResult:
        return cls(success=True, content=content, raw=raw)

    @classmethod
    def failed(cls, diagnostic: Diagnostic) -> SendResult:
        return cls(success=False, error=diagnostic.message, diagnostic=diagnostic)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "content": self.content, "raw": self.raw}
        return _failure_dict(self.error, self.diagnostic)


@dataclass(frozen=True)
class StreamResult:
    success: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True}
        return {"success": False, "error": self.error}


@dataclass(frozen=True)
class ConnectionTestResult:
    success: bool
    message: str | None = None
    error: str | None = None
    diagnostic: Diagnostic | None = None

    @classmethod
    def failed(cls, diagnostic: Diagnostic) -> ConnectionTestResult:
        return cls(success=False, error=diagnostic.message, diagnostic=diagnostic)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "message": self.message}
        return _failure_dict(self.error, self.diagnostic)


@dataclass(frozen=True)
class ModelListResult:
    success: bool
    models: list[str] = field(default_factory=list)
    error: str | None = None
    diagnostic: Diagnostic | None = None

    @classmethod
    def failed(cls, diagnostic: Diagnostic, message: str) -> ModelListResult:
        return cls(success=False, error=message, diagnostic=diagnostic)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "models": list(self.models)}
        result = _failure_dict(self.error, self.diagnostic)
        result["models"] = []
        return result


def _failure_dict(error: str | None, diagnostic: Diagnostic | None) -> dict[str, Any]:
    result: dict[str, Any] = {"success": False, "error": error or "Unknown error occurred"}
    if diagnostic is not None:
        result["category"] = diagnostic.category.value
    return result
