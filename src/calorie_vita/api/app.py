"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import FastAPI, HTTPException, Request, status

from calorie_vita.api.schemas import (
    ChatMessageModel,
    ChatSessionModel,
    CoachMessageRequest,
    CoachReplyModel,
    DailyProgressModel,
    EnergyEstimateModel,
    EnergyEstimateRequest,
    FoodEntryDetailModel,
    FoodEntryModel,
    FoodEntryRequest,
    GoalsResponse,
    GoalsUpdateRequest,
    HealthGradeModel,
    MacroAllocationModel,
    NutritionSampleModel,
    PreferencesModel,
    ProductModel,
    WeightLogModel,
    WeightLogRequest,
    WeightLogStatsModel,
)
from calorie_vita.app_logging import configure_logging
from calorie_vita.containers import AppContainer
from calorie_vita.domain.recognition import RecognizedFood
from calorie_vita.services.energy import (
    bmr_for_elapsed_time,
    daily_bmr,
    estimate_active_calories,
)
from calorie_vita.services.goals import GoalUpdate
from calorie_vita.services.health_grade import compute_health_grade
from calorie_vita.services.macros import allocate_macros


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/nutrition/health-grade")
    async def health_grade(sample: NutritionSampleModel) -> HealthGradeModel:
        """Grade a nutrition sample."""
        return HealthGradeModel.from_domain(compute_health_grade(sample.to_domain()))

    @app.get("/nutrition/macros")
    async def macros(calorie_goal: str | None = None) -> MacroAllocationModel:
        """Allocate a kcal goal; unusable input falls back to the default goal."""
        return MacroAllocationModel.from_domain(allocate_macros(calorie_goal))

    @app.get("/users/{user_id}/goals")
    async def get_goals(user_id: UUID, request: Request) -> GoalsResponse:
        state_container: AppContainer = request.app.state.container
        converter = state_container.preferences_service.converter_for(user_id)
        goals = state_container.goals_service.get_goals(user_id)
        return GoalsResponse.from_domain(goals, converter)

    @app.put("/users/{user_id}/goals")
    async def update_goals(
        user_id: UUID, payload: GoalsUpdateRequest, request: Request
    ) -> GoalsResponse:
        """Save goals entered in the user's calorie unit."""
        state_container: AppContainer = request.app.state.container
        converter = state_container.preferences_service.converter_for(user_id)
        goals = state_container.goals_service.update_goals(
            user_id, GoalUpdate(**payload.model_dump()), converter
        )
        return GoalsResponse.from_domain(goals, converter)

    @app.get("/users/{user_id}/preferences")
    async def get_preferences(user_id: UUID, request: Request) -> PreferencesModel:
        state_container: AppContainer = request.app.state.container
        preferences = state_container.preferences_service.get_preferences(user_id)
        return PreferencesModel(calorie_unit=preferences.calorie_unit)

    @app.put("/users/{user_id}/preferences")
    async def update_preferences(
        user_id: UUID, payload: PreferencesModel, request: Request
    ) -> PreferencesModel:
        state_container: AppContainer = request.app.state.container
        preferences = state_container.preferences_service.set_calorie_unit(
            user_id, payload.calorie_unit
        )
        return PreferencesModel(calorie_unit=preferences.calorie_unit)

    @app.post("/users/{user_id}/food-history", status_code=status.HTTP_201_CREATED)
    async def log_food(
        user_id: UUID, payload: FoodEntryRequest, request: Request
    ) -> FoodEntryModel:
        state_container: AppContainer = request.app.state.container
        try:
            entry = state_container.food_history_service.log_entry(
                user_id=user_id,
                sample=payload.sample.to_domain(),
                source=payload.source,
                logged_at=payload.logged_at,
                brand=payload.brand,
                category=payload.category,
                notes=payload.notes,
            )
        except ValueError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        return FoodEntryModel.from_domain(entry)

    @app.get("/users/{user_id}/food-history")
    async def list_food(
        user_id: UUID, request: Request, limit: int = 20
    ) -> dict[str, list[FoodEntryModel]]:
        state_container: AppContainer = request.app.state.container
        entries = state_container.food_history_service.list_recent(user_id, limit)
        return {"entries": [FoodEntryModel.from_domain(entry) for entry in entries]}

    @app.get("/food-history/{entry_id}")
    async def food_detail(entry_id: UUID, request: Request) -> FoodEntryDetailModel:
        """Return a logged entry with its health grade."""
        state_container: AppContainer = request.app.state.container
        detail = state_container.food_history_service.get_entry_detail(entry_id)
        if detail is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND)
        return FoodEntryDetailModel.from_domain(detail)

    @app.get("/users/{user_id}/daily-progress")
    async def daily_progress(
        user_id: UUID,
        request: Request,
        day: date | None = None,
        timezone: str | None = None,
    ) -> DailyProgressModel:
        state_container: AppContainer = request.app.state.container
        timezone_name = timezone or state_container.settings.default_timezone
        if not _is_valid_timezone(timezone_name):
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST, detail=f"Unknown timezone: {timezone_name}"
            )
        resolved_day = day or datetime.now(tz=ZoneInfo(timezone_name)).date()
        progress = state_container.food_history_service.get_daily_progress(
            user_id, resolved_day, timezone_name
        )
        converter = state_container.preferences_service.converter_for(user_id)
        return DailyProgressModel.from_domain(progress, converter)

    @app.post("/users/{user_id}/weight-logs", status_code=status.HTTP_201_CREATED)
    async def log_weight(
        user_id: UUID, payload: WeightLogRequest, request: Request
    ) -> WeightLogModel:
        state_container: AppContainer = request.app.state.container
        try:
            log = state_container.weight_log_service.log_weight(
                user_id, payload.weight_kg, payload.logged_on, payload.notes
            )
        except ValueError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        return WeightLogModel.from_domain(log)

    @app.get("/users/{user_id}/weight-logs")
    async def list_weights(
        user_id: UUID, request: Request, limit: int = 30
    ) -> dict[str, list[WeightLogModel]]:
        state_container: AppContainer = request.app.state.container
        logs = state_container.weight_log_service.list_logs(user_id, limit)
        return {"logs": [WeightLogModel.from_domain(log) for log in logs]}

    @app.get("/users/{user_id}/weight-logs/stats")
    async def weight_stats(user_id: UUID, request: Request) -> WeightLogStatsModel:
        state_container: AppContainer = request.app.state.container
        stats = state_container.weight_log_service.get_stats(user_id)
        if stats is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND)
        return WeightLogStatsModel.from_domain(stats)

    @app.get("/products/{barcode}")
    async def product(barcode: str, request: Request) -> ProductModel:
        """Look up a packaged product by barcode."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.product_lookup_service.lookup(barcode)
        except ValueError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        except Exception as exc:
            logger.exception("Product lookup failed", extra={"barcode": barcode})
            raise HTTPException(status.HTTP_502_BAD_GATEWAY) from exc
        if result is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND)
        return ProductModel.from_domain(result, compute_health_grade(result.sample))

    @app.post("/users/{user_id}/food-recognition")
    async def recognize_food(
        user_id: UUID, request: Request
    ) -> dict[str, list[RecognizedFood]]:
        """Recognise foods in an image sent as the raw request body."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await request.body()
        if not image_bytes:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Image is empty")
        try:
            recognition = await state_container.recognition_service.recognize(
                image_bytes
            )
        except Exception as exc:
            logger.exception("Food recognition failed", extra={"user_id": str(user_id)})
            raise HTTPException(status.HTTP_502_BAD_GATEWAY) from exc
        return {"items": recognition.items}

    @app.post("/energy/active-calories")
    async def active_calories(
        payload: EnergyEstimateRequest, request: Request
    ) -> EnergyEstimateModel:
        """Split a day's total burn into resting and active kcal."""
        state_container: AppContainer = request.app.state.container
        now = payload.at or datetime.now(
            tz=ZoneInfo(state_container.settings.default_timezone)
        )
        bmr = daily_bmr(payload.weight_kg, payload.height_cm, payload.age, payload.sex)
        return EnergyEstimateModel(
            daily_bmr=bmr,
            basal_calories=bmr_for_elapsed_time(bmr, now),
            active_calories=estimate_active_calories(
                payload.total_calories,
                payload.weight_kg,
                payload.height_cm,
                payload.age,
                payload.sex,
                now,
            ),
        )

    @app.post("/users/{user_id}/coach/messages")
    async def coach_message(
        user_id: UUID, payload: CoachMessageRequest, request: Request
    ) -> CoachReplyModel:
        """Ask the coach a question, continuing a session when one is given."""
        state_container: AppContainer = request.app.state.container
        try:
            reply = await state_container.coaching_service.send_message(
                user_id, payload.text, payload.session_id
            )
        except ValueError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        except Exception as exc:
            logger.exception("Coach reply failed", extra={"user_id": str(user_id)})
            raise HTTPException(status.HTTP_502_BAD_GATEWAY) from exc
        if reply is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND)
        return CoachReplyModel.from_domain(reply)

    @app.get("/users/{user_id}/coach/sessions")
    async def coach_sessions(
        user_id: UUID, request: Request, limit: int = 20
    ) -> dict[str, list[ChatSessionModel]]:
        state_container: AppContainer = request.app.state.container
        sessions = state_container.coaching_service.list_sessions(user_id, limit)
        return {"sessions": [ChatSessionModel.from_domain(s) for s in sessions]}

    @app.get("/users/{user_id}/coach/sessions/{session_id}/messages")
    async def coach_messages(
        user_id: UUID, session_id: UUID, request: Request
    ) -> dict[str, list[ChatMessageModel]]:
        state_container: AppContainer = request.app.state.container
        messages = state_container.coaching_service.list_messages(user_id, session_id)
        if messages is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND)
        return {"messages": [ChatMessageModel.from_domain(m) for m in messages]}

    @app.delete(
        "/users/{user_id}/coach/sessions/{session_id}",
        status_code=status.HTTP_204_NO_CONTENT,
    )
    async def delete_coach_session(
        user_id: UUID, session_id: UUID, request: Request
    ) -> None:
        state_container: AppContainer = request.app.state.container
        if not state_container.coaching_service.delete_session(user_id, session_id):
            raise HTTPException(status.HTTP_404_NOT_FOUND)

    @app.delete(
        "/users/{user_id}/coach/sessions", status_code=status.HTTP_204_NO_CONTENT
    )
    async def clear_coach_history(user_id: UUID, request: Request) -> None:
        state_container: AppContainer = request.app.state.container
        state_container.coaching_service.clear_history(user_id)

    return app


def _is_valid_timezone(value: str) -> bool:
    try:
        ZoneInfo(value)
    except Exception:
        return False
    return True
