"""Playwright-powered automation engine with LLM page interpretation."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

from playwright.async_api import Error, async_playwright
from pydantic import TypeAdapter, ValidationError

from ..config import EngineConfig
from ..llm.base import LLMClient
from ..llm.json_parser import extract_json_list, extract_json_object
from ..models import ObservedAction, PlannedAction
from .base import AutomationEngine, EngineError
from .prompt_builder import SUPPORTED_METHODS, PromptBuilder

LOGGER = logging.getLogger(__name__)

_MAX_ELEMENTS = 200
_MAX_TEXT_CHARS = 20000
_ACTION_TIMEOUT_MS = 30000
_VARIABLE = re.compile(r"%(\w+)%")

# Collects visible interactive elements together with a selector that
# re-locates each of them.
_ELEMENTS_SCRIPT = """
(limit) => {
  const nodes = document.querySelectorAll(
    'a, button, input, select, textarea, [role=button], [role=link], [onclick], [contenteditable=true]'
  );
  const out = [];
  for (const el of nodes) {
    const rect = el.getBoundingClientRect();
    if (rect.width === 0 || rect.height === 0) continue;
    if (!el.dataset.bta) el.dataset.bta = String(out.length);
    out.push({
      selector: `[data-bta="${el.dataset.bta}"]`,
      tag: el.tagName.toLowerCase(),
      type: el.getAttribute('type') || undefined,
      text: (el.innerText || el.value || el.getAttribute('aria-label') || el.getAttribute('placeholder') || '').trim().slice(0, 120),
    });
    if (out.length >= limit) break;
  }
  return out;
}
"""


class PlaywrightEngine(AutomationEngine):
    """Automation engine backed by Playwright and an LLM."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        llm: Optional[LLMClient] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._llm = llm
        self._prompts = prompt_builder or PromptBuilder()
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None

    async def init(self) -> None:
        if self._llm is None:
            raise EngineError("An LLM client is required to run the engine")
        LOGGER.debug(
            "Starting Playwright (env=%s, headless=%s, model=%s)",
            self._config.env,
            self._config.headless,
            self._config.model_name,
        )
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self._config.headless,
            args=["--no-sandbox", "--disable-dev-shm-usage", "--disable-gpu"],
        )
        self._context = await self._browser.new_context(
            viewport={"width": self._config.viewport_width, "height": self._config.viewport_height}
        )
        self._page = await self._context.new_page()

    async def close(self) -> None:
        LOGGER.debug("Stopping Playwright engine")
        try:
            if self._context:
                await self._context.close()
        finally:
            if self._browser:
                await self._browser.close()
            if self._playwright:
                await self._playwright.stop()
            if self._llm:
                await self._llm.aclose()
        self._context = None
        self._browser = None
        self._playwright = None
        self._page = None

    async def navigate(self, url: str) -> None:
        page = self._require_page()
        try:
            await page.goto(url, wait_until="load")
        except Error as exc:  # pragma: no cover - Playwright exception path
            raise EngineError(str(exc)) from exc
        await self._settle()

    async def act(self, action: str, variables: Optional[Mapping[str, Any]] = None) -> None:
        page = self._require_page()
        elements = await self._elements()
        reply = await self._complete(self._prompts.act(action, elements, variables))
        try:
            step = PlannedAction.model_validate(extract_json_object(reply))
        except (ValueError, ValidationError) as exc:
            raise EngineError(f"Could not understand the planned action: {exc}") from exc
        if step.method not in SUPPORTED_METHODS:
            raise EngineError(f"Unsupported method: {step.method}")
        arguments = [substitute_variables(arg, variables) for arg in step.arguments]
        self._debug("Executing %s on %s", step.method, step.selector)
        locator = page.locator(step.selector).first
        try:
            if step.method in {"fill", "type", "press", "select_option"}:
                if not arguments:
                    raise EngineError(f"Method {step.method} requires an argument")
                await getattr(locator, step.method)(arguments[0], timeout=_ACTION_TIMEOUT_MS)
            else:
                await getattr(locator, step.method)(timeout=_ACTION_TIMEOUT_MS)
        except Error as exc:  # pragma: no cover - Playwright exception path
            raise EngineError(str(exc)) from exc
        await self._settle()

    async def extract(self, instruction: str, schema: type) -> dict[str, Any]:
        page = self._require_page()
        adapter = TypeAdapter(schema)
        text = (await page.inner_text("body"))[:_MAX_TEXT_CHARS]
        reply = await self._complete(self._prompts.extract(instruction, text, adapter.json_schema()))
        try:
            data = adapter.validate_python(extract_json_object(reply))
        except (ValueError, ValidationError) as exc:
            raise EngineError(f"Extracted data does not match the schema: {exc}") from exc
        return {"data": adapter.dump_python(data, mode="json", by_alias=True)}

    async def observe(self, instruction: str) -> list[dict[str, Any]]:
        self._require_page()
        elements = await self._elements()
        reply = await self._complete(self._prompts.observe(instruction, elements))
        try:
            items = [ObservedAction.model_validate(item) for item in extract_json_list(reply, "elements")]
        except (ValueError, ValidationError) as exc:
            raise EngineError(f"Could not understand the observation: {exc}") from exc
        return [item.model_dump() for item in items]

    def _require_page(self):
        if not self._page:
            raise EngineError("Engine is not initialized")
        return self._page

    async def _elements(self) -> list[dict[str, Any]]:
        return await self._require_page().evaluate(_ELEMENTS_SCRIPT, _MAX_ELEMENTS)

    async def _complete(self, messages) -> str:
        if self._llm is None:
            raise EngineError("An LLM client is required to run the engine")
        self._debug("Sending %d messages to %s", len(messages), self._config.model_name)
        return await self._llm.complete(messages)

    async def _settle(self) -> None:
        page = self._require_page()
        try:
            await page.wait_for_load_state(
                "domcontentloaded", timeout=self._config.dom_settle_timeout * 1000
            )
        except Error:
            self._debug("DOM did not settle within %.1fs", self._config.dom_settle_timeout)

    def _debug(self, message: str, *args: Any) -> None:
        if self._config.verbose >= 2 or self._config.debug_dom:
            LOGGER.debug(message, *args)


def substitute_variables(value: str, variables: Optional[Mapping[str, Any]]) -> str:
    """Replace ``%name%`` placeholders with the matching variable values."""

    if not variables:
        return value

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        return str(variables[key]) if key in variables else match.group(0)

    return _VARIABLE.sub(_replace, value)
