"""
Weight Resolver (carry-over).

Decides the starting weight of a set materialized from a template: the most
recently logged weight for the exercise when there is one above zero,
otherwise the template's own weight.

One resolver lives for one generation run. Lookups are memoized per
normalized exercise name for that run only.
"""
from typing import Dict, Optional
import logging

from application.exceptions import DataStoreError
from domain.models import normalize_name
from logbook.core.history_reader import HistoryReader

logger = logging.getLogger(__name__)


class WeightResolver:
    """
    Resolves carry-over weights.

    Usage:
        >>> resolver = WeightResolver(HistoryReader(store))
        >>> await resolver.resolve(user_id, "Bench Press", template_weight=40)
        52.5
    """

    def __init__(self, history_reader: HistoryReader, cache_enabled: bool = True):
        self._history = history_reader
        self._cache_enabled = cache_enabled
        self._cache: Dict[str, Optional[float]] = {}

    async def last_used_weight(self, user_id: str, exercise_name: str) -> Optional[float]:
        """
        Weight of the most recently logged set of the exercise.

        Store errors propagate; resolve() is the forgiving entry point.
        """
        key = normalize_name(exercise_name)
        if not key:
            return None
        if self._cache_enabled and key in self._cache:
            return self._cache[key]

        entries = await self._history.read_exercise_history(user_id, exercise_name, limit=1)
        weight = entries[0].weight if entries else None
        if self._cache_enabled:
            self._cache[key] = weight
        return weight

    async def resolve(self, user_id: str, exercise_name: str, template_weight: float) -> float:
        """
        Starting weight for one set.

        Args:
            user_id: Owner of the history
            exercise_name: Exercise name, matched case-insensitively
            template_weight: Weight stored on the template set

        Returns:
            The last used weight when it is above zero, else template_weight
        """
        try:
            history_weight = await self.last_used_weight(user_id, exercise_name)
        except DataStoreError as e:
            logger.warning(f"Carry-over lookup failed for '{exercise_name}', using template weight: {e}")
            return template_weight

        if history_weight is not None and history_weight > 0:
            return history_weight
        return template_weight
