"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from calorie_tracker.adapters.memory_repositories import (
    InMemoryEntryRepository,
    InMemoryTotalsRepository,
)
from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer
from calorie_tracker.services.entries import EntryService
from calorie_tracker.services.summaries import SummaryService


@dataclass
class TickingClock:
    """Clock that advances one second per call."""

    current: datetime = field(
        default_factory=lambda: datetime(2026, 2, 3, 8, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        value = self.current
        self.current = value + timedelta(seconds=1)
        return value


class RecordingTotalsRepository(InMemoryTotalsRepository):
    """In-memory ledger that records every increment."""

    def __init__(self) -> None:
        super().__init__()
        self.increments: list[tuple[str, float]] = []

    def increment_total(self, day: str, delta: float) -> None:
        self.increments.append((day, delta))
        super().increment_total(day, delta)


class FailingTotalsRepository(InMemoryTotalsRepository):
    """In-memory ledger whose increments fail while `failing` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.failing = False

    def increment_total(self, day: str, delta: float) -> None:
        if self.failing:
            raise RuntimeError("ledger unavailable")
        super().increment_total(day, delta)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        auth_token="test-secret",
        storage_backend="memory",
        _env_file=None,
    )


@pytest.fixture
def entry_repository() -> InMemoryEntryRepository:
    return InMemoryEntryRepository()


@pytest.fixture
def totals_repository() -> RecordingTotalsRepository:
    return RecordingTotalsRepository()


@pytest.fixture
def entry_service(
    entry_repository: InMemoryEntryRepository,
    totals_repository: RecordingTotalsRepository,
) -> EntryService:
    return EntryService(
        entries=entry_repository, totals=totals_repository, clock=TickingClock()
    )


@pytest.fixture
def summary_service(
    entry_repository: InMemoryEntryRepository,
    totals_repository: RecordingTotalsRepository,
) -> SummaryService:
    return SummaryService(entries=entry_repository, totals=totals_repository)


@pytest.fixture
def container(
    settings: Settings,
    entry_service: EntryService,
    summary_service: SummaryService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        entry_service=entry_service,
        summary_service=summary_service,
        close_resources=close_resources,
    )


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def failing_totals_repository() -> FailingTotalsRepository:
    return FailingTotalsRepository()
