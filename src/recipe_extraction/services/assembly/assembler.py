"""Recipe assembly.

Turns an extraction envelope into a ``CanonicalRecipe``. Successful AI output
is normalized; failures become template recipes. Either way the result
satisfies the canonical invariants (non-empty lists, dense numbering, a
thumbnail path) and carries its provenance in ``quality``/``isSynthetic``.
"""

from __future__ import annotations

import re
from typing import Any

from recipe_extraction.llm.prompts import ExtractedRecipe
from recipe_extraction.observability.logging import get_logger
from recipe_extraction.schemas.enums import Difficulty, Platform, RecipeQuality
from recipe_extraction.schemas.recipe import (
    CanonicalRecipe,
    RecipeIngredient,
    RecipeInstruction,
)
from recipe_extraction.services.extraction.models import (
    ExtractionEnvelope,
    ExtractionFailure,
    FailureKind,
)
from recipe_extraction.services.extraction.recovery import (
    INGREDIENTS_PLACEHOLDER,
    INSTRUCTIONS_PLACEHOLDER,
)


logger = get_logger(__name__)

PARTIAL_NOTE = (
    "[NOTE: Some recipe details could not be extracted automatically. "
    "Please review and edit this recipe.]"
)
SYNTHETIC_NOTE = "[NOTE: This is placeholder recipe data because automatic extraction failed]"
UNKNOWN_INGREDIENT = "Unknown ingredient"
UNTITLED = "Untitled Recipe"

_TEMPLATE_INGREDIENTS = ("Ingredient 1", "Ingredient 2")
_TEMPLATE_FIRST_STEP = "Step 1 - Please edit this recipe with the correct steps."
_TEMPLATE_SECOND_STEP = "Step 2 - The AI couldn't fully parse the recipe details."

_UNICODE_FRACTIONS = {
    "½": 0.5,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 0.25,
    "¾": 0.75,
    "⅛": 0.125,
}
_FRACTION = re.compile(r"(?:(\d+)\s+)?(\d+)\s*/\s*(\d+)")
_DECIMAL = re.compile(r"\d+(?:[.,]\d+)?")
_DURATION = re.compile(
    r"(\d+(?:\.\d+)?)\s*(hours?|hrs?|h|minutes?|mins?|m)\b", re.IGNORECASE
)


# =============================================================================
# Value coercion
# =============================================================================


def coerce_number(value: Any) -> float | None:
    """Positive number from ints, floats or strings like "15 minutes", "1/2".

    Anything else, including zero and negatives, becomes None.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        number = _parse_number(value)
        if number is None:
            return None
    else:
        return None
    return number if number > 0 else None


def _parse_number(text: str) -> float | None:
    text = text.strip()
    fraction = _FRACTION.search(text)
    if fraction:
        whole, numerator, denominator = fraction.groups()
        if int(denominator) == 0:
            return None
        return int(whole or 0) + int(numerator) / int(denominator)

    for symbol, fraction_value in _UNICODE_FRACTIONS.items():
        index = text.find(symbol)
        if index != -1:
            whole = re.search(r"(\d+)\s*$", text[:index])
            return int(whole.group(1) if whole else 0) + fraction_value

    decimal = _DECIMAL.search(text)
    if decimal:
        return float(decimal.group().replace(",", "."))
    return None


def coerce_minutes(value: Any) -> int | None:
    """Duration in whole minutes; understands "1 hour 30 minutes"."""
    if isinstance(value, str):
        parts = _DURATION.findall(value)
        if parts:
            total = sum(
                float(amount) * (60 if unit.lower().startswith("h") else 1)
                for amount, unit in parts
            )
            return round(total) if total > 0 else None
    number = coerce_number(value)
    if number is None:
        return None
    minutes = round(number)
    return minutes if minutes > 0 else None


def coerce_count(value: Any) -> int | None:
    number = coerce_number(value)
    if number is None:
        return None
    count = round(number)
    return count if count > 0 else None


def coerce_difficulty(value: Any) -> Difficulty | None:
    if not isinstance(value, str):
        return None
    try:
        return Difficulty(value.strip().lower())
    except ValueError:
        return None


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, dict | list):
        return None
    text = str(value).strip()
    return text or None


def normalize_tags(value: Any) -> set[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list | tuple | set):
        return set()
    tags = (_text(tag) for tag in value)
    stripped = (tag.lstrip("#").strip().lower() for tag in tags if tag)
    return {tag for tag in stripped if tag}


def normalize_ingredients(items: Any) -> list[RecipeIngredient]:
    """Ingredient list in source order with dense ``orderIndex``."""
    if not isinstance(items, list):
        return []

    ingredients: list[RecipeIngredient] = []
    for item in items:
        if item is None:
            continue
        if isinstance(item, dict):
            name = _text(item.get("name")) or _text(item.get("ingredient"))
            quantity = coerce_number(item.get("quantity", item.get("amount")))
            unit = _text(item.get("unit"))
            notes = _text(item.get("notes"))
        else:
            name, quantity, unit, notes = _text(item), None, None, None

        ingredients.append(
            RecipeIngredient(
                name=name or UNKNOWN_INGREDIENT,
                quantity=quantity,
                unit=unit,
                notes=notes,
                order_index=len(ingredients) + 1,
            )
        )
    return ingredients


def normalize_instructions(items: Any) -> list[RecipeInstruction]:
    """Non-blank steps in source order with dense ``stepNumber``."""
    if not isinstance(items, list):
        return []

    instructions: list[RecipeInstruction] = []
    for item in items:
        if isinstance(item, dict):
            description = (
                _text(item.get("description"))
                or _text(item.get("text"))
                or _text(item.get("step"))
            )
        else:
            description = _text(item)
        if not description:
            continue
        instructions.append(
            RecipeInstruction(
                step_number=len(instructions) + 1,
                description=description,
            )
        )
    return instructions


def _noted(note: str, description: str | None) -> str:
    return f"{note} {description}" if description else note


# =============================================================================
# Assembler
# =============================================================================


class RecipeAssembler:
    """Build the canonical recipe from whatever extraction produced."""

    def assemble(
        self,
        url: str,
        platform: Platform,
        envelope: ExtractionEnvelope,
        thumbnail_path: str,
        *,
        source_title: str | None = None,
    ) -> CanonicalRecipe:
        """Assemble a recipe; never fails for bad AI output.

        Args:
            url: Source post URL.
            platform: Resolved platform of ``url``.
            envelope: Gateway result (or an acquisition failure).
            thumbnail_path: Resolved local thumbnail path.
            source_title: Scraped or oEmbed title, used by the templated
                recipe when recovery failed.
        """
        if isinstance(envelope, ExtractionFailure):
            return self._from_failure(
                url, platform, envelope, thumbnail_path, source_title
            )

        extracted = ExtractedRecipe.model_validate(envelope.data)

        ingredients = normalize_ingredients(extracted.ingredients)
        instructions = normalize_instructions(extracted.instructions)
        partial = envelope.partial or not ingredients or not instructions

        if not ingredients:
            ingredients = normalize_ingredients([INGREDIENTS_PLACEHOLDER])
        if not instructions:
            instructions = normalize_instructions([INSTRUCTIONS_PLACEHOLDER])

        description = _text(extracted.description)
        if partial:
            description = _noted(PARTIAL_NOTE, description)

        return self._build(
            url=url,
            platform=platform,
            thumbnail_path=thumbnail_path,
            quality=RecipeQuality.PARTIAL if partial else RecipeQuality.COMPLETE,
            title=_text(extracted.title) or source_title or UNTITLED,
            description=description or "",
            prep_time=coerce_minutes(extracted.prep_time),
            cook_time=coerce_minutes(extracted.cooking_time),
            serving_size=coerce_count(extracted.serving_size),
            difficulty=coerce_difficulty(extracted.difficulty_level),
            ingredients=ingredients,
            instructions=instructions,
            tags=normalize_tags(extracted.tags),
        )

    def _from_failure(
        self,
        url: str,
        platform: Platform,
        failure: ExtractionFailure,
        thumbnail_path: str,
        source_title: str | None,
    ) -> CanonicalRecipe:
        name = platform.display_name
        ingredients = normalize_ingredients(
            [{"name": label, "quantity": 1} for label in _TEMPLATE_INGREDIENTS]
        )
        tags = {"imported", platform.value}

        if failure.kind is FailureKind.JSON_RECOVERY and source_title:
            logger.info("Using templated recipe", url=url, title=source_title)
            return self._build(
                url=url,
                platform=platform,
                thumbnail_path=thumbnail_path,
                quality=RecipeQuality.TEMPLATED,
                title=source_title,
                description=_noted(SYNTHETIC_NOTE, f"Recipe for {source_title}."),
                ingredients=ingredients,
                instructions=normalize_instructions(
                    [_TEMPLATE_FIRST_STEP, _TEMPLATE_SECOND_STEP]
                ),
                tags=tags,
            )

        logger.info("Using synthetic recipe", url=url, kind=failure.kind)
        return self._build(
            url=url,
            platform=platform,
            thumbnail_path=thumbnail_path,
            quality=RecipeQuality.SYNTHETIC,
            title=f"Recipe from {name}",
            description=_noted(
                SYNTHETIC_NOTE,
                f"This recipe was imported from {name} but could not be fully "
                "parsed. Please edit it to add the correct details.",
            ),
            ingredients=ingredients,
            instructions=normalize_instructions(
                [
                    f"{_TEMPLATE_FIRST_STEP} The original content from {name} "
                    "could not be processed.",
                    _TEMPLATE_SECOND_STEP,
                ]
            ),
            tags=tags,
        )

    @staticmethod
    def _build(
        *,
        url: str,
        platform: Platform,
        thumbnail_path: str,
        quality: RecipeQuality,
        **fields: Any,
    ) -> CanonicalRecipe:
        return CanonicalRecipe(
            **fields,
            thumbnail_path=thumbnail_path,
            source_url=url,
            source_type=platform,
            quality=quality,
            is_synthetic=quality.is_synthetic,
        )
