"""Recover a recipe JSON object from free-form model output.

Models asked for "only JSON" still wrap it in fences, add commentary, emit
single quotes or trailing commas, or get cut off mid-object. The strategies
below run in order and the first one that yields a recipe-like object wins:

a. ``direct``: strip code fences and parse.
b. ``balanced_block``: parse the first balanced ``{...}`` block.
c. ``brace_slice``: parse from the first ``{`` to the last ``}``.
d. ``repaired``: fix common syntax slips, then parse.
e. ``field_extraction``: pull ``title``/``ingredients``/``instructions``
   out individually, filling a missing list with a placeholder.

Every function here is pure.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import orjson

from recipe_extraction.services.extraction.exceptions import JSONRecoveryError


RECIPE_KEYS = ("title", "ingredients", "instructions")

INGREDIENTS_PLACEHOLDER = "Ingredients could not be extracted"
INSTRUCTIONS_PLACEHOLDER = "Instructions could not be extracted"

_FENCE = re.compile(r"```(?:json|javascript|js)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_UNQUOTED_KEY = re.compile(r"([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)\s*:")

_TITLE_PATTERNS = (
    re.compile(r'"title"\s*:\s*"([^"]+)"'),
    re.compile(r'title\s*:\s*"([^"]+)"', re.IGNORECASE),
    re.compile(r"title\s*:\s*([^,\n}]+)", re.IGNORECASE),
)
_DESCRIPTION_PATTERN = re.compile(r'"description"\s*:\s*"([^"]*)"')
_QUOTED = re.compile(r'"([^"]+)"')
_LIST_ITEM = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(.+?)\s*$")


@dataclass(frozen=True, slots=True)
class RecoveryResult:
    """Recipe data recovered from model output.

    Attributes:
        data: Parsed recipe object (camelCase keys as the model emitted them).
        strategy: Name of the strategy that produced ``data``.
        partial: True when a placeholder list was filled in.
    """

    data: dict[str, Any]
    strategy: str
    partial: bool = False


def looks_like_recipe(value: Any) -> bool:
    """A dict carrying at least one of title, ingredients or instructions."""
    return isinstance(value, dict) and any(key in value for key in RECIPE_KEYS)


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences, keeping their contents."""
    return _FENCE.sub("", text).strip()


def _parse_recipe(text: str) -> dict[str, Any] | None:
    try:
        value = orjson.loads(text)
    except orjson.JSONDecodeError:
        return None
    if isinstance(value, list):
        value = next((item for item in value if looks_like_recipe(item)), None)
    return value if looks_like_recipe(value) else None


def _balanced_blocks(text: str) -> list[str]:
    """Top-level ``{...}`` blocks, respecting braces inside strings."""
    blocks: list[str] = []
    depth = 0
    start = -1
    in_string = False
    escaped = False
    for index, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            if depth == 0:
                start = index
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                blocks.append(text[start : index + 1])
    return blocks


def _brace_slice(text: str) -> str | None:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def single_to_double_quotes(text: str) -> str:
    """Convert single-quoted strings to double-quoted ones.

    Apostrophes inside double-quoted strings are left alone.
    """
    out: list[str] = []
    quote: str | None = None
    escaped = False
    for char in text:
        if quote is None:
            if char in "\"'":
                quote = char
                out.append('"')
            else:
                out.append(char)
            continue
        if escaped:
            escaped = False
            # \' is not a valid JSON escape
            if char == "'" and out and out[-1] == "\\":
                out[-1] = "'"
            else:
                out.append(char)
            continue
        if char == "\\":
            escaped = True
            out.append(char)
        elif char == quote:
            quote = None
            out.append('"')
        elif char == '"' and quote == "'":
            out.append('\\"')
        else:
            out.append(char)
    return "".join(out)


def repair_json(text: str) -> str:
    """Quote bare keys and drop trailing commas."""
    repaired = _UNQUOTED_KEY.sub(r'\1"\2":', text)
    return _TRAILING_COMMA.sub(r"\1", repaired)


# =============================================================================
# Strategies
# =============================================================================


def parse_direct(text: str) -> RecoveryResult | None:
    """Strategy a: fence-stripped text parses as a recipe object."""
    data = _parse_recipe(strip_code_fences(text))
    return RecoveryResult(data, "direct") if data is not None else None


def parse_balanced_block(text: str) -> RecoveryResult | None:
    """Strategy b: the first balanced object block that parses."""
    for block in _balanced_blocks(strip_code_fences(text)):
        data = _parse_recipe(block)
        if data is not None:
            return RecoveryResult(data, "balanced_block")
    return None


def parse_brace_slice(text: str) -> RecoveryResult | None:
    """Strategy c: everything between the first and last brace."""
    sliced = _brace_slice(strip_code_fences(text))
    if sliced is None:
        return None
    data = _parse_recipe(sliced)
    return RecoveryResult(data, "brace_slice") if data is not None else None


def parse_repaired(text: str) -> RecoveryResult | None:
    """Strategy d: deterministic syntax repairs, then parse."""
    candidate = _brace_slice(strip_code_fences(text))
    if candidate is None:
        return None

    repaired = repair_json(candidate)
    data = _parse_recipe(repaired)
    if data is None:
        data = _parse_recipe(repair_json(single_to_double_quotes(candidate)))
    return RecoveryResult(data, "repaired") if data is not None else None


def extract_fields(text: str) -> RecoveryResult | None:
    """Strategy e: field-by-field extraction with placeholders.

    Needs a title and at least one of the two lists.
    """
    body = strip_code_fences(text)
    title = _extract_title(body)
    if not title:
        return None

    ingredients = _extract_list(body, "ingredients", item_key="name")
    instructions = _extract_list(body, "instructions", item_key="description")
    if not ingredients and not instructions:
        return None

    partial = not ingredients or not instructions
    if not ingredients:
        ingredients = [{"name": INGREDIENTS_PLACEHOLDER, "quantity": 1, "unit": ""}]
    if not instructions:
        instructions = [{"stepNumber": 1, "description": INSTRUCTIONS_PLACEHOLDER}]

    description_match = _DESCRIPTION_PATTERN.search(body)
    description = (
        description_match.group(1).strip() if description_match else ""
    ) or f"Recipe for {title}"

    data = {
        "title": title,
        "description": description,
        "ingredients": ingredients,
        "instructions": instructions,
    }
    return RecoveryResult(data, "field_extraction", partial=partial)


def _extract_title(body: str) -> str | None:
    for pattern in _TITLE_PATTERNS:
        match = pattern.search(body)
        if match:
            title = match.group(1).strip().strip("\"'").strip()
            if title:
                return title
    return None


def _extract_list(body: str, key: str, *, item_key: str) -> list[Any]:
    array = re.search(rf'"?{key}"?\s*:\s*(\[[^\]]+\])', body, re.IGNORECASE)
    if array:
        fragment = array.group(1)
        for candidate in (fragment, repair_json(single_to_double_quotes(fragment))):
            try:
                items = orjson.loads(candidate)
            except orjson.JSONDecodeError:
                continue
            if isinstance(items, list) and items:
                return items

        named = re.findall(rf'"{item_key}"\s*:\s*"([^"]+)"', fragment)
        if named:
            return named
        quoted = _QUOTED.findall(fragment)
        if quoted:
            return quoted

    return _extract_bulleted_section(body, key)


def _extract_bulleted_section(body: str, key: str) -> list[str]:
    """Bullet or numbered lines under a ``key:`` heading."""
    lines = body.splitlines()
    heading = re.compile(rf"^\W*{key}\W*$", re.IGNORECASE)
    for index, line in enumerate(lines):
        if not heading.match(line):
            continue
        items: list[str] = []
        for following in lines[index + 1 :]:
            item = _LIST_ITEM.match(following)
            if item is None:
                if items or following.strip():
                    break
                continue
            items.append(item.group(1))
        if items:
            return items
    return []


RecoveryStrategy = Callable[[str], RecoveryResult | None]

RECOVERY_STRATEGIES: tuple[RecoveryStrategy, ...] = (
    parse_direct,
    parse_balanced_block,
    parse_brace_slice,
    parse_repaired,
    extract_fields,
)


def recover_recipe_json(
    text: str,
    strategies: tuple[RecoveryStrategy, ...] = RECOVERY_STRATEGIES,
) -> RecoveryResult:
    """Run the strategies in order and return the first success.

    Raises:
        JSONRecoveryError: If no strategy produced a recipe object.
    """
    if not text or not text.strip():
        msg = "Model output is empty"
        raise JSONRecoveryError(msg)

    for strategy in strategies:
        result = strategy(text)
        if result is not None:
            return result

    msg = f"No recipe JSON could be recovered from {len(text)} characters of output"
    raise JSONRecoveryError(msg)
