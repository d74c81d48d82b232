"""
Carry-over Weight Interface (Port).

The Template Generator asks this collaborator for the starting weight of
every set it materializes. A fresh instance is created per generation run,
so implementations may memoize lookups for the run.
"""

from typing import Protocol


class CarryOverWeights(Protocol):
    """Resolves the starting weight of a generated set."""

    async def resolve(self, user_id: str, exercise_name: str, template_weight: float) -> float:
        """
        Args:
            user_id: Owner of the history
            exercise_name: Exercise name, matched case-insensitively
            template_weight: Weight stored on the template set

        Returns:
            Weight to write on the generated set (never raises for store errors)
        """
        ...
