"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

import pytest

from calorie_vita.adapters.openfoodfacts_client import ProductClient
from calorie_vita.config import Settings
from calorie_vita.containers import AppContainer
from calorie_vita.domain.coaching import ChatMessage, ChatRole, ChatSession
from calorie_vita.domain.food_history import FoodHistoryEntry, FoodSource
from calorie_vita.domain.goals import UserGoals
from calorie_vita.domain.nutrition import NutritionSample
from calorie_vita.domain.preferences import UserPreferences
from calorie_vita.domain.weight import WeightLog
from calorie_vita.services.cache import InMemoryProductCache
from calorie_vita.services.coaching import ChatHistoryRepository, CoachClient, CoachingService
from calorie_vita.services.food_history import FoodHistoryRepository, FoodHistoryService
from calorie_vita.services.goals import GoalsRepository, GoalsService
from calorie_vita.services.notifier import GoalsNotifier
from calorie_vita.services.preferences import PreferencesRepository, PreferencesService
from calorie_vita.services.products import ProductLookupService
from calorie_vita.services.recognition import FoodRecognitionService, VisionClient
from calorie_vita.services.weight_logs import WeightLogRepository, WeightLogService

# Structurally valid JWT so supabase.create_client accepts it.
FAKE_SUPABASE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJl"
)


@dataclass
class InMemoryGoalsRepository(GoalsRepository):
    """In-memory goals repository for tests."""

    goals: dict[UUID, UserGoals] = field(default_factory=dict)
    saves: int = 0

    def get_goals(self, user_id: UUID) -> UserGoals | None:
        return self.goals.get(user_id)

    def save_goals(self, user_id: UUID, goals: UserGoals) -> None:
        self.goals[user_id] = goals
        self.saves += 1


@dataclass
class InMemoryPreferencesRepository(PreferencesRepository):
    """In-memory preferences repository for tests."""

    preferences: dict[UUID, UserPreferences] = field(default_factory=dict)

    def get_preferences(self, user_id: UUID) -> UserPreferences | None:
        return self.preferences.get(user_id)

    def save_preferences(self, user_id: UUID, preferences: UserPreferences) -> None:
        self.preferences[user_id] = preferences


@dataclass
class InMemoryFoodHistoryRepository(FoodHistoryRepository):
    """In-memory food history repository for tests."""

    entries: dict[UUID, FoodHistoryEntry] = field(default_factory=dict)

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        sample: NutritionSample,
        source: FoodSource,
        logged_at: datetime,
        brand: str | None,
        category: str | None,
        notes: str | None,
    ) -> FoodHistoryEntry:
        entry = FoodHistoryEntry(
            id=uuid4(),
            user_id=user_id,
            sample=sample,
            source=source,
            logged_at=logged_at,
            brand=brand,
            category=category,
            notes=notes,
        )
        self.entries[entry.id] = entry
        return entry

    def get_entry(self, entry_id: UUID) -> FoodHistoryEntry | None:
        return self.entries.get(entry_id)

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodHistoryEntry]:
        return [
            entry
            for entry in self.entries.values()
            if entry.user_id == user_id and start <= entry.logged_at < end
        ]

    def list_recent_entries(self, user_id: UUID, limit: int) -> list[FoodHistoryEntry]:
        owned = [entry for entry in self.entries.values() if entry.user_id == user_id]
        return sorted(owned, key=lambda entry: entry.logged_at, reverse=True)[:limit]


@dataclass
class InMemoryWeightLogRepository(WeightLogRepository):
    """In-memory weight log repository for tests."""

    logs: list[WeightLog] = field(default_factory=list)

    def create_log(
        self, user_id: UUID, weight_kg: float, logged_on: date, notes: str | None
    ) -> WeightLog:
        log = WeightLog(
            id=uuid4(),
            user_id=user_id,
            weight_kg=weight_kg,
            logged_on=logged_on,
            notes=notes,
        )
        self.logs.append(log)
        return log

    def list_logs(self, user_id: UUID, limit: int) -> list[WeightLog]:
        owned = [log for log in self.logs if log.user_id == user_id]
        return sorted(owned, key=lambda log: log.logged_on, reverse=True)[:limit]


@dataclass
class InMemoryChatRepository(ChatHistoryRepository):
    """In-memory coaching history for tests."""

    sessions: dict[UUID, ChatSession] = field(default_factory=dict)
    messages: list[ChatMessage] = field(default_factory=list)

    def create_session(
        self, user_id: UUID, title: str, created_at: datetime
    ) -> ChatSession:
        session = ChatSession(
            id=uuid4(), user_id=user_id, title=title, created_at=created_at
        )
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: UUID) -> ChatSession | None:
        return self.sessions.get(session_id)

    def list_sessions(self, user_id: UUID, limit: int) -> list[ChatSession]:
        owned = [s for s in self.sessions.values() if s.user_id == user_id]
        return sorted(owned, key=lambda s: s.created_at, reverse=True)[:limit]

    def add_message(
        self, session_id: UUID, role: ChatRole, text: str, created_at: datetime
    ) -> ChatMessage:
        message = ChatMessage(
            id=uuid4(),
            session_id=session_id,
            role=role,
            text=text,
            created_at=created_at,
        )
        self.messages.append(message)
        return message

    def list_messages(self, session_id: UUID, limit: int) -> list[ChatMessage]:
        owned = [m for m in self.messages if m.session_id == session_id]
        return owned[-limit:]

    def delete_session(self, session_id: UUID) -> None:
        self.sessions.pop(session_id, None)
        self.messages = [m for m in self.messages if m.session_id != session_id]

    def delete_sessions(self, user_id: UUID) -> None:
        for session in self.list_sessions(user_id, len(self.sessions)):
            self.delete_session(session.id)


@dataclass
class FakeCoachClient(CoachClient):
    """Fake coach that records conversations and answers from a script."""

    answers: list[str] = field(default_factory=list)
    failures: list[Exception] = field(default_factory=list)
    requests: list[dict[str, object]] = field(default_factory=list)

    async def reply(
        self,
        *,
        model: str,
        store: bool,
        instructions: str,
        messages: list[dict[str, str]],
        max_output_tokens: int,
    ) -> str:
        self.requests.append(
            {
                "model": model,
                "instructions": instructions,
                "messages": messages,
                "max_output_tokens": max_output_tokens,
            }
        )
        if self.failures:
            raise self.failures.pop(0)
        if self.answers:
            return self.answers.pop(0)
        return "Drink water and keep moving."


def off_product_payload(**overrides: object) -> dict[str, object]:
    """Open Food Facts response for a 250 g bowl of cereal."""
    product: dict[str, object] = {
        "product_name": "Crunchy Oat Cereal",
        "brands": "Oaty",
        "categories": "Breakfast cereals",
        "serving_size": "250 g",
        "nutriments": {
            "energy-kcal_100g": 380,
            "proteins_100g": 10,
            "carbohydrates_100g": 64,
            "fat_100g": 7,
            "fiber_100g": 8,
            "sugars_100g": 12,
        },
    }
    product.update(overrides)
    return {"status": 1, "product": product}


@dataclass
class FakeProductClient(ProductClient):
    """Fake Open Food Facts client with canned responses."""

    payloads: dict[str, dict[str, object]] = field(default_factory=dict)
    failures: list[Exception] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)

    async def get_product(self, barcode: str) -> dict[str, object]:
        self.calls.append(barcode)
        if self.failures:
            raise self.failures.pop(0)
        return self.payloads.get(barcode, {"status": 0, "status_verbose": "not found"})


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "items": [
                {
                    "food_name": "grilled chicken salad",
                    "confidence": 0.82,
                    "weight_grams": 300,
                    "calories": 330,
                    "protein": 36,
                    "carbs": 12,
                    "fat": 15,
                    "fiber": 5,
                    "sugar": 6,
                }
            ]
        }
    )
    requests: list[dict[str, object]] = field(default_factory=list)

    async def extract(
        self,
        *,
        model: str,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.requests.append(
            {"model": model, "image_data_url": image_data_url, "store": store}
        )
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=FAKE_SUPABASE_KEY,
        openai_api_key="openai-key",
    )


@pytest.fixture
def goals_repository() -> InMemoryGoalsRepository:
    return InMemoryGoalsRepository()


@pytest.fixture
def notifier() -> GoalsNotifier:
    return GoalsNotifier()


@pytest.fixture
def goals_service(
    goals_repository: InMemoryGoalsRepository, notifier: GoalsNotifier
) -> GoalsService:
    return GoalsService(repository=goals_repository, notifier=notifier)


@pytest.fixture
def product_client() -> FakeProductClient:
    return FakeProductClient(payloads={"5000112637922": off_product_payload()})


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def coach_client() -> FakeCoachClient:
    return FakeCoachClient()


@pytest.fixture
def container(
    settings: Settings,
    goals_service: GoalsService,
    notifier: GoalsNotifier,
    product_client: FakeProductClient,
    vision_client: FakeVisionClient,
    coach_client: FakeCoachClient,
) -> AppContainer:
    food_history_service = FoodHistoryService(
        repository=InMemoryFoodHistoryRepository(),
        goals_service=goals_service,
    )
    notifier.subscribe(food_history_service.on_goals_changed)
    product_lookup_service = ProductLookupService(
        client=product_client,
        cache=InMemoryProductCache(),
        retry_delay_seconds=0,
    )
    recognition_service = FoodRecognitionService(
        client=vision_client, model=settings.openai_model
    )

    coaching_service = CoachingService(
        repository=InMemoryChatRepository(),
        client=coach_client,
        goals_service=goals_service,
        model=settings.coach_model,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        goals_notifier=notifier,
        goals_service=goals_service,
        preferences_service=PreferencesService(InMemoryPreferencesRepository()),
        food_history_service=food_history_service,
        weight_log_service=WeightLogService(InMemoryWeightLogRepository()),
        product_lookup_service=product_lookup_service,
        recognition_service=recognition_service,
        coaching_service=coaching_service,
        close_resources=close_resources,
    )
