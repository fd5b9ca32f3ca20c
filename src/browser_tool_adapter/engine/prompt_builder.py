"""Prompt construction for the AI-driven engine operations."""

from __future__ import annotations

import json
from textwrap import dedent
from typing import Any, Iterable, Mapping, Optional

from ..llm.base import ChatMessage
from ..models import PlannedAction

_SYSTEM_PROMPT = (
    "You are a browser automation assistant. You read a description of the current "
    "web page and answer with strict JSON only, using double quotes."
)

SUPPORTED_METHODS = ("click", "fill", "type", "press", "select_option", "check", "hover")


class PromptBuilder:
    """Build chat messages for act, extract and observe calls."""

    def act(
        self,
        action: str,
        elements: Iterable[Mapping[str, Any]],
        variables: Optional[Mapping[str, Any]] = None,
    ) -> list[ChatMessage]:
        variable_section = "(none)"
        if variables:
            # Only the placeholder names are shown; values are substituted locally.
            variable_section = "\n".join(f"- %{name}%" for name in variables)
        example = PlannedAction(
            selector="#search",
            method="fill",
            arguments=["%query%"],
            description="Type the query into the search box",
        )
        prompt = dedent(
            f"""
            Perform the following action on the page: "{action}"

            Interactive elements on the page:
            {self._elements(elements)}

            Available variables (use the placeholder verbatim as an argument value):
            {variable_section}

            Respond with one JSON object describing a single step, for example:
            {example.model_dump_json()}

            Allowed methods: {", ".join(SUPPORTED_METHODS)}.
            """
        ).strip()
        return self._messages(prompt)

    def extract(self, instruction: str, page_text: str, json_schema: Mapping[str, Any]) -> list[ChatMessage]:
        prompt = dedent(
            f"""
            Extract data from the page following this instruction: "{instruction}"

            The answer must be a JSON object valid against this JSON schema:
            {json.dumps(json_schema)}

            Page content:
            {page_text}
            """
        ).strip()
        return self._messages(prompt)

    def observe(self, instruction: str, elements: Iterable[Mapping[str, Any]]) -> list[ChatMessage]:
        prompt = dedent(
            f"""
            Find elements on the page relevant to this instruction: "{instruction}"

            Interactive elements on the page:
            {self._elements(elements)}

            Respond with a JSON object {{"elements": [...]}} where each item has the keys
            "selector", "description", "method" and "arguments".
            """
        ).strip()
        return self._messages(prompt)

    @staticmethod
    def _elements(elements: Iterable[Mapping[str, Any]]) -> str:
        lines = [json.dumps(dict(element)) for element in elements]
        return "\n".join(lines) or "(no interactive elements found)"

    @staticmethod
    def _messages(prompt: str) -> list[ChatMessage]:
        return [
            ChatMessage(role="system", content=_SYSTEM_PROMPT),
            ChatMessage(role="user", content=prompt),
        ]
