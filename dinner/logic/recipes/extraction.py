"""Recipe import: fetch a web page and have the model turn it into a recipe.

Nothing here writes to the store; a successful extraction is a preview that
the caller saves separately with ``logic.recipes.service.save_recipe``.
"""
from __future__ import annotations
import json
import logging
import os
import re
from json import JSONDecodeError
from typing import Any, Optional

import httpx
from openai import OpenAI
from pydantic import ValidationError

from dinner.domain.Ingredient import RecipeIngredient
from dinner.domain.Outcome import Outcome
from dinner.domain.Recipe import Recipe
from dinner.utilities.config import OPENAI_MODEL, PAGE_TEXT_LIMIT
from dinner.utilities.constants import PROMPT_TEMPLATE, RECIPE_JSON_FORMAT
from dinner.utilities.network import FetchError, fetch_page
from dinner.utilities.validators import ExtractedRecipe

logger = logging.getLogger(__name__)

__all__ = [
    "INVALID_STRUCTURE", "coerce_extracted_recipe", "parse_model_output",
    "extract_recipe", "scrape_recipe_from_url", "to_recipe",
]

INVALID_STRUCTURE = "Invalid recipe structure"


def _get_openai_client() -> Optional[OpenAI]:
    """Return an OpenAI client if OPENAI_API_KEY is set, otherwise None."""
    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key:
        return None
    return OpenAI(api_key=api_key)


# === Text Cleaning Helpers ===
def _strip_code_fences(text: str) -> str:
    """Remove common markdown code fences and leading/trailing whitespace."""
    text = re.sub(r"```(?:json)?\n(.*?)```", r"\1", text, flags=re.S)
    text = re.sub(r"^```|```$", "", text.strip())
    return text.strip()


def _remove_trailing_commas(text: str) -> str:
    return re.sub(r",\s*(\}|\])", r"\1", text)


def _extract_json_by_balancing(text: str) -> Optional[str]:
    """Extract the first JSON object/array by balancing braces/brackets."""
    start = None
    stack = []
    in_string = False
    escape = False

    for i, ch in enumerate(text):
        if ch == '"' and not escape:
            in_string = not in_string
        if in_string and ch == "\\" and not escape:
            escape = True
            continue
        escape = False

        if not in_string:
            if ch in "{[":
                if start is None:
                    start = i
                stack.append(ch)
            elif ch in "}]":
                if not stack:
                    continue
                opening = stack.pop()
                if (opening == "{" and ch != "}") or (opening == "[" and ch != "]"):
                    return None
                if not stack and start is not None:
                    return text[start:i + 1]
    return None


def parse_model_output(text: str) -> Optional[Any]:
    """json.loads with the repair chain: fences, trailing commas, brace balancing."""
    if not text:
        return None
    try:
        return json.loads(text)
    except JSONDecodeError:
        pass
    cleaned = _remove_trailing_commas(_strip_code_fences(text))
    try:
        return json.loads(cleaned)
    except JSONDecodeError:
        pass
    candidate = _extract_json_by_balancing(cleaned)
    if candidate:
        try:
            return json.loads(_remove_trailing_commas(candidate))
        except JSONDecodeError:
            logger.debug("Balanced JSON candidate still invalid")
    return None


def coerce_extracted_recipe(payload: Any) -> Outcome:
    """Validate a parsed model payload. Value: ExtractedRecipe."""
    if not isinstance(payload, dict):
        return Outcome.failure(INVALID_STRUCTURE)
    try:
        return Outcome.success(ExtractedRecipe.model_validate(payload))
    except ValidationError as e:
        logger.info("Extracted recipe rejected: %s", e.errors()[:3])
        return Outcome.failure(INVALID_STRUCTURE)


def to_recipe(extracted: ExtractedRecipe, source_url: Optional[str] = None) -> Recipe:
    return Recipe(
        title=extracted.title,
        instructions=extracted.instructions,
        ingredients=[RecipeIngredient(i.name, i.qty, i.unit, i.is_essential) for i in extracted.ingredients],
        source_url=source_url,
    )


def _request_json_fix(client: OpenAI, previous_output: str) -> Optional[str]:
    """Ask the model to reformat previous_output as a strict JSON object."""
    try:
        prompt = (
            "The previous response contained a recipe but was not valid JSON. "
            "Please reformat ONLY the recipe as valid JSON (no surrounding text) using this shape:"
            + RECIPE_JSON_FORMAT + "\nHere is the original output:\n\n" + previous_output
        )
        resp = client.chat.completions.create(
            model=OPENAI_MODEL,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
        )
        return (resp.choices[0].message.content or "").strip()
    except Exception:
        logger.exception("Error while requesting AI to fix JSON formatting")
        return None


def extract_recipe(page_text: str, client: Optional[OpenAI] = None) -> Outcome:
    """Run the extraction prompt over the page. Value: ExtractedRecipe."""
    client = client or _get_openai_client()
    if client is None:
        logger.warning("OPENAI_API_KEY not set, cannot import recipe")
        return Outcome.failure("OPENAI_API_KEY not set")

    prompt = PROMPT_TEMPLATE + "\nPage text:\n" + (page_text or "")[:PAGE_TEXT_LIMIT]
    try:
        resp = client.chat.completions.create(
            model=OPENAI_MODEL,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
        )
        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
    except Exception as e:
        logger.exception("OpenAI request failed")
        return Outcome.failure(str(e) or "OpenAI request failed")
    if not content:
        return Outcome.failure("Empty response from OpenAI")

    payload = parse_model_output(content)
    if payload is None:
        fixed = _request_json_fix(client, content)
        payload = parse_model_output(fixed) if fixed else None
    if payload is None:
        logger.error("AI output is not valid JSON and no JSON substring found")
        return Outcome.failure(INVALID_STRUCTURE)
    return coerce_extracted_recipe(payload)


def scrape_recipe_from_url(url: str, client: Optional[OpenAI] = None,
                           http: Optional[httpx.Client] = None) -> Outcome:
    """Fetch url and extract a recipe preview from it. Value: ExtractedRecipe."""
    if not (url or "").strip():
        return Outcome.failure("URL is required")
    client = client or _get_openai_client()
    if client is None:
        return Outcome.failure("OPENAI_API_KEY not set")
    try:
        page = fetch_page(url.strip(), http=http)
    except FetchError as e:
        return Outcome.failure(e.message)
    outcome = extract_recipe(page, client=client)
    if outcome:
        logger.info("Extracted %r from %s", outcome.value.title, url)
    return outcome
