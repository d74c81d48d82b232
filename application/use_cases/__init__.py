"""
Application Use Cases for the logbook engine.

This package contains application-level use cases that orchestrate domain
logic through the Data Store port:
- CloneEngine: copy blueprints into new, independent rows
- GenerateWeekUseCase: expand week templates into dated workouts

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain objects and repository ports
- Dependencies are injected via constructors for testability
- Use cases return domain models and result dataclasses

Usage:
    from application.use_cases import CloneEngine, GenerateWeekUseCase

    clone_engine = CloneEngine(store)
    copy = await clone_engine.clone_week_template(
        user_id="user-123",
        template_id="tpl-1",
        new_name="Deload Week",
    )

    generate = GenerateWeekUseCase(
        store=store,
        clone_engine=clone_engine,
        resolver_factory=lambda: WeightResolver(HistoryReader(store)),
    )
    result = await generate.execute(
        user_id="user-123",
        template_id="tpl-1",
        week_start_date=date(2024, 1, 1),
    )
"""

from application.use_cases.clone_engine import (
    CloneEngine,
    DaySource,
    LiveDayWrite,
    bump_usage,
)
from application.use_cases.generate_week import (
    GenerateWeekUseCase,
    GenerationResult,
    GenerationState,
    StateTransition,
)
from application.use_cases.loaders import (
    fetch_owned,
    load_day_template,
    load_library_day,
    load_week_template,
)

__all__ = [
    # CloneEngine
    "CloneEngine",
    "DaySource",
    "LiveDayWrite",
    "bump_usage",
    # GenerateWeek
    "GenerateWeekUseCase",
    "GenerationResult",
    "GenerationState",
    "StateTransition",
    # Loaders
    "fetch_owned",
    "load_week_template",
    "load_day_template",
    "load_library_day",
]
