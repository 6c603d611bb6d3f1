"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from marathon_tracker.adapters.intervals_client import (
    HttpxIntervalsClient,
    IntervalsClient,
)
from marathon_tracker.adapters.supabase_activity_repository import (
    SupabaseActivityRepository,
)
from marathon_tracker.adapters.supabase_carb_repository import SupabaseCarbRepository
from marathon_tracker.adapters.supabase_config_repository import (
    SupabaseConfigRepository,
)
from marathon_tracker.adapters.supabase_tracking_repository import (
    SupabaseTrackingRepository,
)
from marathon_tracker.config import Settings
from marathon_tracker.domain.cycle import TrainingCycle
from marathon_tracker.services.activities import ActivityService
from marathon_tracker.services.adherence import NutritionTrackingService
from marathon_tracker.services.app_config import AppConfigService
from marathon_tracker.services.cache import TtlCache
from marathon_tracker.services.carbs import CarbTrackingService
from marathon_tracker.services.cycle import load_training_cycle


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    cycle: TrainingCycle
    intervals_client: IntervalsClient
    config_service: AppConfigService
    nutrition_service: NutritionTrackingService
    carb_service: CarbTrackingService
    activity_service: ActivityService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    cycle = load_training_cycle(resolved_settings)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    config_service = AppConfigService(SupabaseConfigRepository(supabase_client))
    nutrition_service = NutritionTrackingService(
        repository=SupabaseTrackingRepository(supabase_client),
        config=config_service,
    )
    carb_service = CarbTrackingService(
        repository=SupabaseCarbRepository(supabase_client),
        config=config_service,
    )
    intervals_client = HttpxIntervalsClient.create(
        api_key=resolved_settings.intervals_api_key,
        athlete_id=resolved_settings.intervals_athlete_id,
        base_url=resolved_settings.intervals_base_url,
    )
    activity_service = ActivityService(
        client=intervals_client,
        repository=SupabaseActivityRepository(supabase_client),
        cache=TtlCache(),
        cache_ttl_seconds=resolved_settings.activity_cache_ttl_seconds,
    )

    async def close_resources() -> None:
        await intervals_client.close()

    return AppContainer(
        settings=resolved_settings,
        cycle=cycle,
        intervals_client=intervals_client,
        config_service=config_service,
        nutrition_service=nutrition_service,
        carb_service=carb_service,
        activity_service=activity_service,
        close_resources=close_resources,
    )
