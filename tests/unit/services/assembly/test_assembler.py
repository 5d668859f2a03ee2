"""Unit tests for RecipeAssembler and its value coercion.

Tests cover:
- Number, duration, count and difficulty coercion
- Ingredient and instruction normalization with dense numbering
- Complete, partial, templated and synthetic assembly
"""

from __future__ import annotations

from typing import Any

import orjson
import pytest

from recipe_extraction.schemas.enums import Difficulty, Platform, RecipeQuality
from recipe_extraction.services.assembly.assembler import (
    PARTIAL_NOTE,
    SYNTHETIC_NOTE,
    UNKNOWN_INGREDIENT,
    UNTITLED,
    RecipeAssembler,
    coerce_count,
    coerce_difficulty,
    coerce_minutes,
    coerce_number,
    normalize_ingredients,
    normalize_instructions,
    normalize_tags,
)
from recipe_extraction.services.extraction.models import (
    ExtractionFailure,
    ExtractionSuccess,
    FailureKind,
)
from recipe_extraction.services.extraction.recovery import (
    INGREDIENTS_PLACEHOLDER,
    recover_recipe_json,
)
from tests.fixtures.llm_responses import RECIPE_JSON, TRUNCATED_RECIPE


pytestmark = pytest.mark.unit

URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
THUMBNAIL = "/uploads/thumb.jpg"


def success(data: dict[str, Any], *, partial: bool = False) -> ExtractionSuccess:
    """Success envelope around recipe data."""
    return ExtractionSuccess(
        data=data,
        provider="openrouter",
        model="model-a",
        strategy="direct",
        partial=partial,
    )


@pytest.fixture
def assembler() -> RecipeAssembler:
    """Create an assembler."""
    return RecipeAssembler()


# =============================================================================
# Coercion
# =============================================================================


class TestCoerceNumber:
    """Tests for coerce_number."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (2, 2.0),
            (0.5, 0.5),
            ("3", 3.0),
            ("1/2", 0.5),
            ("1 1/2", 1.5),
            ("½", 0.5),
            ("1½", 1.5),
            ("2,5", 2.5),
            ("15 minutes", 15.0),
        ],
    )
    def test_parses_numbers(self, value: Any, expected: float) -> None:
        """Should read numbers, fractions and numbers inside text."""
        assert coerce_number(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "value", [None, True, 0, -3, "0", "a pinch", "1/0", [1], {"q": 1}]
    )
    def test_rejects_non_positive_and_non_numeric(self, value: Any) -> None:
        """Should return None for anything that is not a positive number."""
        assert coerce_number(value) is None


class TestCoerceMinutes:
    """Tests for coerce_minutes."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (30, 30),
            (20.4, 20),
            ("45", 45),
            ("10 minutes", 10),
            ("1 hour 30 minutes", 90),
            ("1.5 hrs", 90),
            ("2h", 120),
        ],
    )
    def test_parses_durations(self, value: Any, expected: int) -> None:
        """Should convert durations to whole minutes."""
        assert coerce_minutes(value) == expected

    @pytest.mark.parametrize("value", [None, "", "overnight", 0, -5])
    def test_rejects_unusable_values(self, value: Any) -> None:
        """Should return None for missing or non-positive durations."""
        assert coerce_minutes(value) is None


class TestSimpleCoercions:
    """Tests for counts, difficulty and tags."""

    def test_coerce_count(self) -> None:
        """Should round servings to a positive integer."""
        assert coerce_count("4 servings") == 4
        assert coerce_count(2.6) == 3
        assert coerce_count("some") is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("EASY", Difficulty.EASY),
            (" Medium ", Difficulty.MEDIUM),
            ("hard", Difficulty.HARD),
            ("expert", None),
            (3, None),
        ],
    )
    def test_coerce_difficulty(self, value: Any, expected: Difficulty | None) -> None:
        """Should accept known levels case-insensitively."""
        assert coerce_difficulty(value) == expected

    def test_normalize_tags(self) -> None:
        """Should lowercase tags and strip hashes."""
        assert normalize_tags(["Dinner", "#Quick", "", None]) == {"dinner", "quick"}
        assert normalize_tags("vegan, #Easy") == {"vegan", "easy"}
        assert normalize_tags(None) == set()

    def test_normalize_tags_drops_bare_hashes(self) -> None:
        """Should not keep an empty tag for a lone hash."""
        assert normalize_tags(["#", "##", "# ", "#Pasta"]) == {"pasta"}


class TestNormalizeLists:
    """Tests for ingredient and instruction normalization."""

    def test_ingredients_keep_order_and_number_densely(self) -> None:
        """Should keep source order and renumber 1..N."""
        ingredients = normalize_ingredients(
            [
                {"name": "", "quantity": 2},
                "salt",
                None,
                {"ingredient": "pepper", "amount": "1/4", "unit": "tsp"},
            ]
        )

        assert [i.name for i in ingredients] == [UNKNOWN_INGREDIENT, "salt", "pepper"]
        assert [i.order_index for i in ingredients] == [1, 2, 3]
        assert ingredients[2].quantity == pytest.approx(0.25)
        assert ingredients[2].unit == "tsp"
        assert ingredients[1].quantity is None

    def test_ingredients_drop_invalid_quantities(self) -> None:
        """Should keep the ingredient but drop a zero quantity."""
        [ingredient] = normalize_ingredients([{"name": "water", "quantity": 0}])

        assert ingredient.quantity is None

    def test_instructions_skip_blank_steps(self) -> None:
        """Should drop blank steps and renumber the rest."""
        instructions = normalize_instructions(
            [
                {"stepNumber": 4, "description": "Mix"},
                "",
                {"text": "Bake"},
                {"step": "Cool"},
                {"description": "   "},
            ]
        )

        assert [i.description for i in instructions] == ["Mix", "Bake", "Cool"]
        assert [i.step_number for i in instructions] == [1, 2, 3]

    def test_non_list_input(self) -> None:
        """Should return empty lists for non-list input."""
        assert normalize_ingredients("flour, sugar") == []
        assert normalize_instructions({"1": "Mix"}) == []


# =============================================================================
# Assembly
# =============================================================================


class TestAssembleSuccess:
    """Tests for assembling AI output."""

    def test_complete_recipe(self, assembler: RecipeAssembler) -> None:
        """Should normalize a full AI response into a complete recipe."""
        envelope = success(orjson.loads(RECIPE_JSON))

        recipe = assembler.assemble(URL, Platform.YOUTUBE, envelope, THUMBNAIL)

        assert recipe.title == "Crispy Garlic Noodles"
        assert recipe.quality == RecipeQuality.COMPLETE
        assert recipe.is_synthetic is False
        assert recipe.prep_time == 10
        assert recipe.cook_time == 15
        assert recipe.serving_size == 2
        assert recipe.difficulty == Difficulty.EASY
        assert recipe.ingredients[1].quantity == pytest.approx(1.5)
        assert [i.order_index for i in recipe.ingredients] == [1, 2, 3]
        assert [s.step_number for s in recipe.instructions] == [1, 2, 3]
        assert recipe.tags == {"noodles", "garlic", "quick"}
        assert recipe.thumbnail_path == THUMBNAIL
        assert recipe.source_url == URL
        assert recipe.source_type == Platform.YOUTUBE
        assert not recipe.description.startswith(PARTIAL_NOTE)

    def test_field_extracted_output_is_partial(self, assembler: RecipeAssembler) -> None:
        """Should mark recipes built from placeholders as partial."""
        recovered = recover_recipe_json(TRUNCATED_RECIPE)
        envelope = success(recovered.data, partial=recovered.partial)

        recipe = assembler.assemble(URL, Platform.YOUTUBE, envelope, THUMBNAIL)

        assert recipe.quality == RecipeQuality.PARTIAL
        assert recipe.is_synthetic is False
        assert recipe.description.startswith(PARTIAL_NOTE)
        assert "Glazed salmon fillets." in recipe.description
        assert len(recipe.ingredients) == 3

    def test_empty_list_gets_placeholder(self, assembler: RecipeAssembler) -> None:
        """Should fill an empty ingredient list and mark the recipe partial."""
        envelope = success({"title": "Soup", "ingredients": [], "instructions": ["Heat"]})

        recipe = assembler.assemble(URL, Platform.TIKTOK, envelope, THUMBNAIL)

        assert recipe.quality == RecipeQuality.PARTIAL
        assert recipe.ingredients[0].name == INGREDIENTS_PLACEHOLDER
        assert recipe.ingredients[0].order_index == 1
        assert recipe.description == PARTIAL_NOTE

    def test_title_falls_back_to_source_title(self, assembler: RecipeAssembler) -> None:
        """Should use the scraped title when the model gave none."""
        envelope = success({"ingredients": ["egg"], "instructions": ["Fry"]})

        with_source = assembler.assemble(
            URL, Platform.YOUTUBE, envelope, THUMBNAIL, source_title="Fried Egg"
        )
        without_source = assembler.assemble(URL, Platform.YOUTUBE, envelope, THUMBNAIL)

        assert with_source.title == "Fried Egg"
        assert without_source.title == UNTITLED

    def test_wrongly_typed_fields_are_dropped(self, assembler: RecipeAssembler) -> None:
        """Should drop values that cannot be coerced instead of failing."""
        envelope = success(
            {
                "title": "Stew",
                "cookingTime": "a while",
                "servingSize": -2,
                "difficultyLevel": "legendary",
                "ingredients": ["beef"],
                "instructions": ["Simmer"],
                "tags": "stew",
            }
        )

        recipe = assembler.assemble(URL, Platform.INSTAGRAM, envelope, THUMBNAIL)

        assert recipe.cook_time is None
        assert recipe.serving_size is None
        assert recipe.difficulty is None
        assert recipe.tags == {"stew"}
        assert recipe.quality == RecipeQuality.COMPLETE


class TestAssembleFailure:
    """Tests for template recipes after failed extraction."""

    def test_recovery_failure_with_title_is_templated(
        self, assembler: RecipeAssembler
    ) -> None:
        """Should keep the scraped title in a templated recipe."""
        envelope = ExtractionFailure(kind=FailureKind.JSON_RECOVERY, detail="garbled")

        recipe = assembler.assemble(
            URL, Platform.YOUTUBE, envelope, THUMBNAIL, source_title="Miso Ramen"
        )

        assert recipe.quality == RecipeQuality.TEMPLATED
        assert recipe.is_synthetic is True
        assert recipe.title == "Miso Ramen"
        assert recipe.description.startswith(SYNTHETIC_NOTE)
        assert recipe.tags == {"imported", "youtube"}
        assert [i.quantity for i in recipe.ingredients] == [1, 1]
        assert [s.step_number for s in recipe.instructions] == [1, 2]

    @pytest.mark.parametrize(
        ("kind", "source_title"),
        [
            (FailureKind.JSON_RECOVERY, None),
            (FailureKind.NOT_CONFIGURED, "Miso Ramen"),
            (FailureKind.TIMEOUT, None),
            (FailureKind.ACQUISITION, None),
        ],
    )
    def test_other_failures_are_synthetic(
        self,
        assembler: RecipeAssembler,
        kind: FailureKind,
        source_title: str | None,
    ) -> None:
        """Should build the generic synthetic recipe."""
        envelope = ExtractionFailure(kind=kind)

        recipe = assembler.assemble(
            URL, Platform.TIKTOK, envelope, THUMBNAIL, source_title=source_title
        )

        assert recipe.quality == RecipeQuality.SYNTHETIC
        assert recipe.is_synthetic is True
        assert recipe.title == "Recipe from TikTok"
        assert recipe.description.startswith(SYNTHETIC_NOTE)
        assert recipe.tags == {"imported", "tiktok"}
        assert len(recipe.ingredients) == 2
        assert len(recipe.instructions) == 2
        assert recipe.thumbnail_path == THUMBNAIL
