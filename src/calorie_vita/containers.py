"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from openai import AsyncOpenAI
from supabase import create_client

from calorie_vita.adapters.openai_coach_client import OpenAICoachClient
from calorie_vita.adapters.openai_vision_client import OpenAIVisionClient
from calorie_vita.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from calorie_vita.adapters.supabase_chat_repository import SupabaseChatRepository
from calorie_vita.adapters.supabase_food_history_repository import (
    SupabaseFoodHistoryRepository,
)
from calorie_vita.adapters.supabase_goals_repository import SupabaseGoalsRepository
from calorie_vita.adapters.supabase_preferences_repository import (
    SupabasePreferencesRepository,
)
from calorie_vita.adapters.supabase_weight_log_repository import (
    SupabaseWeightLogRepository,
)
from calorie_vita.config import Settings
from calorie_vita.services.cache import InMemoryProductCache
from calorie_vita.services.coaching import CoachingService
from calorie_vita.services.food_history import FoodHistoryService
from calorie_vita.services.goals import GoalsService
from calorie_vita.services.notifier import GoalsNotifier
from calorie_vita.services.preferences import PreferencesService
from calorie_vita.services.products import ProductLookupService
from calorie_vita.services.recognition import FoodRecognitionService
from calorie_vita.services.weight_logs import WeightLogService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    goals_notifier: GoalsNotifier
    goals_service: GoalsService
    preferences_service: PreferencesService
    food_history_service: FoodHistoryService
    weight_log_service: WeightLogService
    product_lookup_service: ProductLookupService
    recognition_service: FoodRecognitionService
    coaching_service: CoachingService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    goals_notifier = GoalsNotifier()
    goals_service = GoalsService(
        repository=SupabaseGoalsRepository(supabase_client),
        notifier=goals_notifier,
        default_calorie_goal=resolved_settings.default_calorie_goal,
    )
    preferences_service = PreferencesService(
        SupabasePreferencesRepository(supabase_client)
    )
    food_history_service = FoodHistoryService(
        repository=SupabaseFoodHistoryRepository(supabase_client),
        goals_service=goals_service,
    )
    goals_notifier.subscribe(food_history_service.on_goals_changed)
    weight_log_service = WeightLogService(SupabaseWeightLogRepository(supabase_client))
    product_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url,
        user_agent=resolved_settings.openfoodfacts_user_agent,
    )
    product_lookup_service = ProductLookupService(
        client=product_client,
        cache=InMemoryProductCache(),
    )
    openai_client = AsyncOpenAI(api_key=resolved_settings.openai_api_key)
    recognition_service = FoodRecognitionService(
        client=OpenAIVisionClient(openai_client),
        model=resolved_settings.openai_model,
        store=resolved_settings.openai_store,
    )
    coaching_service = CoachingService(
        repository=SupabaseChatRepository(supabase_client),
        client=OpenAICoachClient(openai_client),
        goals_service=goals_service,
        model=resolved_settings.coach_model,
        store=resolved_settings.openai_store,
        history_limit=resolved_settings.coach_history_limit,
        max_output_tokens=resolved_settings.coach_max_output_tokens,
    )

    async def close_resources() -> None:
        await product_client.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        goals_notifier=goals_notifier,
        goals_service=goals_service,
        preferences_service=preferences_service,
        food_history_service=food_history_service,
        weight_log_service=weight_log_service,
        product_lookup_service=product_lookup_service,
        recognition_service=recognition_service,
        coaching_service=coaching_service,
        close_resources=close_resources,
    )
