"""Request and response models for the HTTP API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field

from calorie_vita.domain.coaching import ChatMessage, ChatRole, ChatSession, CoachReply
from calorie_vita.domain.food_history import (
    DailyProgress,
    FoodEntryDetail,
    FoodHistoryEntry,
    FoodSource,
)
from calorie_vita.domain.goals import MacroAllocation, UserGoals
from calorie_vita.domain.nutrition import Grade, GradeColor, HealthGrade, NutritionSample
from calorie_vita.domain.preferences import CalorieUnit
from calorie_vita.domain.products import ProductLookupResult
from calorie_vita.domain.weight import WeightLog, WeightLogStats
from calorie_vita.services.energy import Sex
from calorie_vita.services.units import CalorieUnitConverter


class NutritionSampleModel(BaseModel):
    """Nutrition values for one portion."""

    food_name: str = Field(min_length=1)
    weight_grams: float = Field(gt=0)
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    fiber: float = Field(default=0.0, ge=0)
    sugar: float = Field(default=0.0, ge=0)

    def to_domain(self) -> NutritionSample:
        return NutritionSample(**self.model_dump())

    @classmethod
    def from_domain(cls, sample: NutritionSample) -> "NutritionSampleModel":
        return cls(
            food_name=sample.food_name,
            weight_grams=sample.weight_grams,
            calories=sample.calories,
            protein=sample.protein,
            carbs=sample.carbs,
            fat=sample.fat,
            fiber=sample.fiber,
            sugar=sample.sugar,
        )


class HealthGradeModel(BaseModel):
    grade: Grade
    label: str
    score: float
    color: GradeColor

    @classmethod
    def from_domain(cls, grade: HealthGrade) -> "HealthGradeModel":
        return cls(
            grade=grade.grade, label=grade.label, score=grade.score, color=grade.color
        )


class MacroAllocationModel(BaseModel):
    carbs_calories: int
    protein_calories: int
    fat_calories: int

    @classmethod
    def from_domain(
        cls, macros: MacroAllocation, converter: CalorieUnitConverter | None = None
    ) -> "MacroAllocationModel":
        if converter is None:
            return cls(
                carbs_calories=macros.carbs_calories,
                protein_calories=macros.protein_calories,
                fat_calories=macros.fat_calories,
            )
        return cls(
            carbs_calories=int(converter.format_short(macros.carbs_calories)),
            protein_calories=int(converter.format_short(macros.protein_calories)),
            fat_calories=int(converter.format_short(macros.fat_calories)),
        )


class GoalsResponse(BaseModel):
    """Goals shown in the user's calorie unit."""

    calorie_unit: CalorieUnit
    calorie_goal: int
    macro_goals: MacroAllocationModel | None
    weight_goal: float | None
    bmi_goal: float | None
    water_glasses_goal: int | None
    steps_per_day_goal: int | None
    last_updated: datetime | None

    @classmethod
    def from_domain(
        cls, goals: UserGoals, converter: CalorieUnitConverter
    ) -> "GoalsResponse":
        return cls(
            calorie_unit=converter.unit,
            calorie_goal=int(converter.format_short(goals.calorie_goal)),
            macro_goals=MacroAllocationModel.from_domain(goals.macro_goals, converter)
            if goals.macro_goals
            else None,
            weight_goal=goals.weight_goal,
            bmi_goal=goals.bmi_goal,
            water_glasses_goal=goals.water_glasses_goal,
            steps_per_day_goal=goals.steps_per_day_goal,
            last_updated=goals.last_updated,
        )


class GoalsUpdateRequest(BaseModel):
    """Goal edits in the user's calorie unit; omitted fields are kept."""

    calorie_goal: float | str | None = None
    carbs_calories: float | None = Field(default=None, ge=0)
    protein_calories: float | None = Field(default=None, ge=0)
    fat_calories: float | None = Field(default=None, ge=0)
    weight_goal: float | None = Field(default=None, gt=0)
    bmi_goal: float | None = Field(default=None, gt=0)
    water_glasses_goal: int | None = Field(default=None, ge=0)
    steps_per_day_goal: int | None = Field(default=None, ge=0)


class PreferencesModel(BaseModel):
    calorie_unit: CalorieUnit


class FoodEntryRequest(BaseModel):
    sample: NutritionSampleModel
    source: FoodSource = FoodSource.MANUAL_ENTRY
    logged_at: AwareDatetime | None = None
    brand: str | None = None
    category: str | None = None
    notes: str | None = None


class FoodEntryModel(BaseModel):
    id: UUID
    user_id: UUID
    sample: NutritionSampleModel
    source: FoodSource
    logged_at: datetime
    brand: str | None
    category: str | None
    notes: str | None

    @classmethod
    def from_domain(cls, entry: FoodHistoryEntry) -> "FoodEntryModel":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            sample=NutritionSampleModel.from_domain(entry.sample),
            source=entry.source,
            logged_at=entry.logged_at,
            brand=entry.brand,
            category=entry.category,
            notes=entry.notes,
        )


class FoodEntryDetailModel(BaseModel):
    entry: FoodEntryModel
    health_grade: HealthGradeModel

    @classmethod
    def from_domain(cls, detail: FoodEntryDetail) -> "FoodEntryDetailModel":
        return cls(
            entry=FoodEntryModel.from_domain(detail.entry),
            health_grade=HealthGradeModel.from_domain(detail.health_grade),
        )


class DailyProgressModel(BaseModel):
    """A day's intake against goals; energy values are in ``calorie_unit``."""

    day: date
    calorie_unit: CalorieUnit
    entry_count: int
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    sugar: float
    calories_goal: int
    calories_remaining: float
    carbs_calories_consumed: float
    protein_calories_consumed: float
    fat_calories_consumed: float
    carbs_calories_goal: int | None
    protein_calories_goal: int | None
    fat_calories_goal: int | None

    @classmethod
    def from_domain(
        cls, progress: DailyProgress, converter: CalorieUnitConverter
    ) -> "DailyProgressModel":
        totals = progress.totals

        def goal(kcal: int | None) -> int | None:
            return None if kcal is None else int(converter.format_short(kcal))

        return cls(
            day=totals.day,
            calorie_unit=converter.unit,
            entry_count=totals.entry_count,
            calories=converter.from_kcal(totals.calories),
            protein=totals.protein,
            carbs=totals.carbs,
            fat=totals.fat,
            fiber=totals.fiber,
            sugar=totals.sugar,
            calories_goal=int(converter.format_short(progress.calories_goal)),
            calories_remaining=converter.from_kcal(progress.calories_remaining),
            carbs_calories_consumed=converter.from_kcal(progress.carbs_calories_consumed),
            protein_calories_consumed=converter.from_kcal(
                progress.protein_calories_consumed
            ),
            fat_calories_consumed=converter.from_kcal(progress.fat_calories_consumed),
            carbs_calories_goal=goal(progress.carbs_calories_goal),
            protein_calories_goal=goal(progress.protein_calories_goal),
            fat_calories_goal=goal(progress.fat_calories_goal),
        )


class WeightLogRequest(BaseModel):
    weight_kg: float
    logged_on: date | None = None
    notes: str | None = None


class WeightLogModel(BaseModel):
    id: UUID
    weight_kg: float
    logged_on: date
    notes: str | None

    @classmethod
    def from_domain(cls, log: WeightLog) -> "WeightLogModel":
        return cls(
            id=log.id, weight_kg=log.weight_kg, logged_on=log.logged_on, notes=log.notes
        )


class WeightLogStatsModel(BaseModel):
    current_weight: float
    previous_weight: float | None
    weight_change: float | None
    weight_change_percentage: float | None
    average_weight: float | None
    total_entries: int
    first_entry_date: date | None
    last_entry_date: date | None
    trend: str

    @classmethod
    def from_domain(cls, stats: WeightLogStats) -> "WeightLogStatsModel":
        return cls(
            current_weight=stats.current_weight,
            previous_weight=stats.previous_weight,
            weight_change=stats.weight_change,
            weight_change_percentage=stats.weight_change_percentage,
            average_weight=stats.average_weight,
            total_entries=stats.total_entries,
            first_entry_date=stats.first_entry_date,
            last_entry_date=stats.last_entry_date,
            trend=stats.trend,
        )


class ProductModel(BaseModel):
    barcode: str
    sample: NutritionSampleModel
    brand: str | None
    category: str | None
    source: str
    health_grade: HealthGradeModel

    @classmethod
    def from_domain(
        cls, product: ProductLookupResult, grade: HealthGrade
    ) -> "ProductModel":
        return cls(
            barcode=product.barcode,
            sample=NutritionSampleModel.from_domain(product.sample),
            brand=product.brand,
            category=product.category,
            source=product.source,
            health_grade=HealthGradeModel.from_domain(grade),
        )


class CoachMessageRequest(BaseModel):
    """A question for the coach; omit ``session_id`` to start a new session."""

    text: str = Field(min_length=1, max_length=4000)
    session_id: UUID | None = None


class ChatSessionModel(BaseModel):
    id: UUID
    title: str
    created_at: datetime

    @classmethod
    def from_domain(cls, session: ChatSession) -> "ChatSessionModel":
        return cls(id=session.id, title=session.title, created_at=session.created_at)


class ChatMessageModel(BaseModel):
    id: UUID
    role: ChatRole
    text: str
    created_at: datetime

    @classmethod
    def from_domain(cls, message: ChatMessage) -> "ChatMessageModel":
        return cls(
            id=message.id,
            role=message.role,
            text=message.text,
            created_at=message.created_at,
        )


class CoachReplyModel(BaseModel):
    session: ChatSessionModel
    message: ChatMessageModel

    @classmethod
    def from_domain(cls, reply: CoachReply) -> "CoachReplyModel":
        return cls(
            session=ChatSessionModel.from_domain(reply.session),
            message=ChatMessageModel.from_domain(reply.message),
        )


class EnergyEstimateRequest(BaseModel):
    """Body measurements and the total kcal burned so far today."""

    total_calories: float = Field(ge=0)
    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    age: int = Field(ge=0, le=150)
    sex: Sex
    at: AwareDatetime | None = None


class EnergyEstimateModel(BaseModel):
    """Resting and active burn in kcal."""

    daily_bmr: float
    basal_calories: float
    active_calories: float
