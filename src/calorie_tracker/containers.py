"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.memory_repositories import (
    InMemoryEntryRepository,
    InMemoryTotalsRepository,
)
from calorie_tracker.adapters.supabase_entry_repository import SupabaseEntryRepository
from calorie_tracker.adapters.supabase_totals_repository import (
    SupabaseTotalsRepository,
)
from calorie_tracker.config import Settings
from calorie_tracker.services.entries import (
    EntryRepository,
    EntryService,
    TotalsRepository,
)
from calorie_tracker.services.summaries import SummaryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    entry_service: EntryService
    summary_service: SummaryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    entry_repository, totals_repository = _build_repositories(resolved_settings)
    entry_service = EntryService(entries=entry_repository, totals=totals_repository)
    summary_service = SummaryService(
        entries=entry_repository, totals=totals_repository
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        entry_service=entry_service,
        summary_service=summary_service,
        close_resources=close_resources,
    )


def _build_repositories(
    settings: Settings,
) -> tuple[EntryRepository, TotalsRepository]:
    if settings.storage_backend == "memory":
        return InMemoryEntryRepository(), InMemoryTotalsRepository()
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError(
            "SUPABASE_URL and SUPABASE_SERVICE_KEY are required for the "
            "supabase storage backend"
        )
    client = create_client(settings.supabase_url, settings.supabase_service_key)
    return (
        SupabaseEntryRepository(client, table=settings.entries_table),
        SupabaseTotalsRepository(
            client,
            table=settings.totals_table,
            increment_function=settings.increment_function,
        ),
    )
