"""Endpoint request DTOs.

JSON bodies use the camelCase names of the stored record shape; the Python
side uses snake_case attributes.
"""

from dataclasses import dataclass

from fastapi import Query
from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Body of POST /chat/send and POST /chat/stream."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    config_id: str | None = Field(None, alias="configId")


class ActiveConfigRequest(BaseModel):
    """Body of PUT /active-config; a null id clears the active pointer."""

    model_config = ConfigDict(populate_by_name=True)

    config_id: str | None = Field(None, alias="configId")


@dataclass(frozen=True, slots=True)
class ConfigListRequest:
    """Parameters for GET /configs."""

    reveal: bool

    @classmethod
    def from_fastapi(
        cls,
        reveal: bool = Query(
            False,
            description="Return API keys in clear text instead of masked",
        ),
    ) -> "ConfigListRequest":
        """Create request from FastAPI dependencies.

        Usage:
            @router.get("/configs")
            async def get_configs(
                request: ConfigListRequest = Depends(ConfigListRequest.from_fastapi),
                ...
            ):
        """
        return cls(reveal=reveal)
