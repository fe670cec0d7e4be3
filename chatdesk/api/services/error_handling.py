"""Error responses for the bridge endpoints.

Only request-shape problems become HTTP errors. Provider failures are
reported inside the normal `{success: false, error}` result body.
"""

import logging
from dataclasses import dataclass

from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ErrorResponseBuilder:
    """Builder for consistent error responses across all endpoints.

    Error response format:
    {
        "type": "error",
        "error": {
            "type": "<error_type>",
            "message": "<error_message>"
        }
    }
    """

    @staticmethod
    def _error(status_code: int, error_type: str, message: str) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content={
                "type": "error",
                "error": {
                    "type": error_type,
                    "message": message,
                },
            },
        )

    @staticmethod
    def invalid_config(reason: str) -> JSONResponse:
        """Build a 400 Bad Request error response for an unusable configuration record."""
        logger.warning("Rejected configuration payload: %s", reason)
        return ErrorResponseBuilder._error(400, "invalid_config", reason)

    @staticmethod
    def storage_error(reason: str) -> JSONResponse:
        """Build a 500 error response when the configuration store fails."""
        logger.error("Configuration store failure: %s", reason)
        return ErrorResponseBuilder._error(500, "storage_error", reason)
