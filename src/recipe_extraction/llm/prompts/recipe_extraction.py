"""Recipe extraction prompt.

Turns the text acquired for a social-media post into a request for a single
JSON recipe object. Social posts rarely carry a full recipe, so the model is
told to infer plausible details rather than refuse.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, Field

from recipe_extraction.schemas.base import DownstreamResponse

from .base import BasePrompt


class ExtractedRecipe(DownstreamResponse):
    """Recipe JSON as returned by the model.

    Values are left loosely typed: models return "15 minutes" for a number or
    a bare string for an ingredient, and the assembler normalizes them.
    """

    title: Any = None
    description: Any = None
    cooking_time: Any = None
    prep_time: Any = None
    serving_size: Any = None
    difficulty_level: Any = None
    ingredients: Any = Field(default_factory=list)
    instructions: Any = Field(default_factory=list)
    tags: Any = Field(default_factory=list)


_JSON_SHAPE = """{
  "title": "Recipe title",
  "description": "Brief description of the recipe",
  "cookingTime": 30,
  "prepTime": 15,
  "servingSize": 4,
  "difficultyLevel": "EASY",
  "ingredients": [
    {
      "name": "Ingredient name",
      "quantity": 1,
      "unit": "cup",
      "orderIndex": 1
    }
  ],
  "instructions": [
    {
      "stepNumber": 1,
      "description": "Step description"
    }
  ],
  "tags": ["tag1", "tag2"]
}"""


class RecipeExtractionPrompt(BasePrompt[ExtractedRecipe]):
    """Prompt for extracting one recipe from post text.

    Example input:
        "Title: Crispy Garlic Noodles\\n\\nTranscript: first boil the noodles..."

    Example output:
        {"title": "Crispy Garlic Noodles", "cookingTime": 15, ...}
    """

    output_schema: ClassVar[type[BaseModel]] = ExtractedRecipe

    system_prompt: ClassVar[str | None] = """You are a helpful AI assistant that specializes in extracting structured recipe information from text. Your task is to extract recipe details from the provided content and format them according to the specified JSON structure.

IMPORTANT RULES:
1. Return ONLY valid JSON without any markdown formatting, explanations, or additional text
2. Do not use code blocks or backticks in your response
3. If you can't find specific information, make reasonable assumptions based on similar recipes
4. Ensure all JSON fields match the exact format specified
5. For numeric values, use numbers without quotes (e.g., 30 not "30")
6. For string values, use proper escaping for quotes and special characters
7. If the content has limited information, use the title and description to infer a plausible recipe
8. When information is missing, create a reasonable recipe that matches the title and theme
9. For YouTube videos without transcripts, focus on the title and any visible ingredients or steps mentioned in the description
10. For TikTok videos, infer the recipe based on the limited information available, focusing on typical recipes that match the title
11. For Instagram posts, create a recipe that would match the description of the food shown in the post
12. Be creative but realistic when filling in missing details from social media posts"""

    temperature: ClassVar[float] = 0.2
    max_tokens: ClassVar[int | None] = 2000

    def __init__(
        self, *, temperature: float | None = None, max_tokens: int | None = None
    ) -> None:
        # Instance overrides from configuration
        if temperature is not None:
            self.temperature = temperature
        if max_tokens is not None:
            self.max_tokens = max_tokens

    def format(self, **kwargs: Any) -> str:
        """Format the extraction prompt.

        Args:
            **kwargs: Must include ``content``, the acquired post text.

        Raises:
            ValueError: If ``content`` is missing or blank.
        """
        content = kwargs.get("content")
        if not content or not str(content).strip():
            msg = "content is required"
            raise ValueError(msg)

        return f"""Extract a complete recipe from the following content. The content may be from a YouTube video transcript, social media post, or other source.

Content: {content}

Please extract and return ONLY a JSON object with the following structure:
{_JSON_SHAPE}

IMPORTANT: Return ONLY the JSON object with no explanations, markdown formatting, or code blocks. Do not wrap the JSON in backticks. The response should start with '{{' and end with '}}' and be valid parseable JSON."""
