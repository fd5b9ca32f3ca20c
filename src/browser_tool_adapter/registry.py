"""Static catalog of the tools exposed by the adapter."""

from __future__ import annotations

from textwrap import dedent
from typing import Iterable, Optional

from .models import ToolDescriptor

NAVIGATE = "stagehand_navigate"
ACT = "stagehand_act"
EXTRACT = "stagehand_extract"
OBSERVE = "stagehand_observe"

_SCHEMA_GUIDE = dedent(
    """
    **Instructions for providing the schema:**

    - The `schema` should be a valid JSON Schema object that defines the structure of the data to extract.
    - Use standard JSON Schema syntax.
    - The server will convert the JSON Schema to a pydantic model internally.

    **Example schemas:**

    1. **Extracting a list of search result titles:**

    ```json
    {
      "type": "object",
      "properties": {
        "searchResults": {
          "type": "array",
          "items": {
            "type": "string",
            "description": "Title of a search result"
          }
        }
      },
      "required": ["searchResults"]
    }
    ```

    2. **Extracting product details:**

    ```json
    {
      "type": "object",
      "properties": {
        "name": { "type": "string" },
        "price": { "type": "string" },
        "rating": { "type": "number" },
        "reviews": {
          "type": "array",
          "items": { "type": "string" }
        }
      },
      "required": ["name", "price", "rating", "reviews"]
    }
    ```

    **Example usage:**

    - **Instruction**: "Extract the titles and URLs of the main search results, excluding any ads."
    - **Schema**:
      ```json
      {
        "type": "object",
        "properties": {
          "results": {
            "type": "array",
            "items": {
              "type": "object",
              "properties": {
                "title": { "type": "string", "description": "The title of the search result" },
                "url": { "type": "string", "description": "The URL of the search result" }
              },
              "required": ["title", "url"]
            }
          }
        },
        "required": ["results"]
      }
      ```

    **Note:**

    - Ensure the schema is valid JSON.
    - Use standard JSON Schema types like `string`, `number`, `array`, `object`, etc.
    - You can add descriptions to help clarify the expected data.
    """
).strip()


DEFAULT_TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name=NAVIGATE,
        description="Navigate to a URL in the browser",
        input_schema={
            "type": "object",
            "properties": {
                "url": {"type": "string", "description": "The URL to navigate to"},
            },
            "required": ["url"],
        },
    ),
    ToolDescriptor(
        name=ACT,
        description="Performs an action on the web page",
        input_schema={
            "type": "object",
            "properties": {
                "action": {"type": "string", "description": "The action to perform"},
                "variables": {
                    "type": "object",
                    "additionalProperties": True,
                    "description": "Variables used in the action template",
                },
            },
            "required": ["action"],
        },
    ),
    ToolDescriptor(
        name=EXTRACT,
        description=(
            "Extracts structured data from the web page based on an instruction "
            "and a JSON schema."
        ),
        input_schema={
            "type": "object",
            "description": _SCHEMA_GUIDE,
            "properties": {
                "instruction": {
                    "type": "string",
                    "description": "Clear instruction for what data to extract from the page",
                },
                "schema": {
                    "type": "object",
                    "description": "A JSON Schema object defining the structure of data to extract",
                    "additionalProperties": True,
                },
            },
            "required": ["instruction", "schema"],
        },
    ),
    ToolDescriptor(
        name=OBSERVE,
        description="Observes actions that can be performed on the web page",
        input_schema={
            "type": "object",
            "properties": {
                "instruction": {
                    "type": "string",
                    "description": "Instruction for observation",
                },
            },
            "required": ["instruction"],
        },
    ),
)


class ToolRegistry:
    """Immutable, ordered mapping of tool names to descriptors."""

    def __init__(self, descriptors: Iterable[ToolDescriptor] = DEFAULT_TOOLS) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in self._tools:
                raise ValueError(f"Duplicate tool name: {descriptor.name}")
            self._tools[descriptor.name] = descriptor

    def list(self) -> list[ToolDescriptor]:
        return list(self._tools.values())

    def exists(self, name: Optional[str]) -> bool:
        return name is not None and name in self._tools

    def names(self) -> list[str]:
        return list(self._tools)
