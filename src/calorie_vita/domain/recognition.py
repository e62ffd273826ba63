"""Models for AI food recognition results."""

from pydantic import BaseModel, Field

from calorie_vita.domain.nutrition import NutritionSample


class RecognizedFood(BaseModel):
    """Single food item recognised in a photo with estimated nutrition."""

    food_name: str
    confidence: float = Field(ge=0.0, le=1.0)
    weight_grams: float = Field(gt=0)
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    fiber: float = Field(default=0.0, ge=0)
    sugar: float = Field(default=0.0, ge=0)

    def to_sample(self) -> NutritionSample:
        """Return the estimate as a nutrition sample."""
        return NutritionSample(
            food_name=self.food_name,
            weight_grams=self.weight_grams,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            fiber=self.fiber,
            sugar=self.sugar,
        )


class FoodRecognition(BaseModel):
    """Structured output for photo recognition."""

    items: list[RecognizedFood]
