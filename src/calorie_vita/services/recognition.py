"""Food recognition from photos using a vision model."""

import base64
from dataclasses import dataclass
from typing import Protocol

from calorie_vita.domain.recognition import FoodRecognition

_NUMBER = {"type": "number", "minimum": 0}

RECOGNITION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "food_name": {"type": "string"},
                    "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
                    "weight_grams": _NUMBER,
                    "calories": _NUMBER,
                    "protein": _NUMBER,
                    "carbs": _NUMBER,
                    "fat": _NUMBER,
                    "fiber": _NUMBER,
                    "sugar": _NUMBER,
                },
                "required": [
                    "food_name",
                    "confidence",
                    "weight_grams",
                    "calories",
                    "protein",
                    "carbs",
                    "fat",
                    "fiber",
                    "sugar",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

RECOGNITION_PROMPT = (
    "Identify each food item in the image. For every item return a short name, "
    "a confidence between 0 and 1, the estimated portion weight in grams, and "
    "the estimated calories (kcal), protein, carbs, fat, fiber and sugar in "
    "grams for that portion."
)


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

    async def extract(
        self,
        *,
        model: str,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured extraction data for an image."""


@dataclass
class FoodRecognitionService:
    """Service that prompts the vision model and validates its output."""

    client: VisionClient
    model: str
    store: bool = False

    async def recognize(self, image_bytes: bytes) -> FoodRecognition:
        """Recognise food items and their nutrition in a photo."""
        if not image_bytes:
            raise ValueError("Image is empty")
        raw = await self.client.extract(
            model=self.model,
            store=self.store,
            image_data_url=_to_data_url(image_bytes),
            schema=RECOGNITION_SCHEMA,
            prompt=RECOGNITION_PROMPT,
        )
        return FoodRecognition.model_validate(raw)


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
