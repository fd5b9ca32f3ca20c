"""Shared models used across the browser tool adapter."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolDescriptor(BaseModel):
    """A callable tool advertised to protocol clients."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")


class TextBlock(BaseModel):
    """A tagged text content block."""

    type: Literal["text"] = "text"
    text: str


class ResponseEnvelope(BaseModel):
    """Uniform result of a tool call, successful or not."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextBlock] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def success(cls, *texts: str) -> "ResponseEnvelope":
        return cls(content=[TextBlock(text=text) for text in texts], is_error=False)

    @classmethod
    def failure(cls, message: str, operation_logs: str) -> "ResponseEnvelope":
        return cls(
            content=[TextBlock(text=message), TextBlock(text=operation_logs)],
            is_error=True,
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# Per-operation arguments ------------------------------------------------------


class NavigateArgs(BaseModel):
    url: str


class ActArgs(BaseModel):
    action: str
    variables: Optional[dict[str, Any]] = None


class ExtractArgs(BaseModel):
    instruction: str
    schema_: dict[str, Any] = Field(alias="schema")


class ObserveArgs(BaseModel):
    instruction: str


class ObservedAction(BaseModel):
    """A candidate interaction reported by the engine's observation call."""

    selector: str
    description: str
    method: Optional[str] = None
    arguments: list[str] = Field(default_factory=list)


class PlannedAction(BaseModel):
    """A single DOM interaction chosen by the LLM for an ``act`` call."""

    selector: str
    method: str = "click"
    arguments: list[str] = Field(default_factory=list)
    description: Optional[str] = None
