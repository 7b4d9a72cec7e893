"""
Step Registry.

The ordered list of wizard steps. Position in the registry is the only
thing that determines navigation order and progress; there is no
branching.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence

from intake.exceptions import StepNotFound


@dataclass(frozen=True)
class Step:
    """A wizard step."""
    id: str
    title: str
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "description": self.description}


class StepRegistry:
    """Ordered, immutable sequence of steps with lookup by id."""

    def __init__(self, steps: Sequence[Step]):
        ids = [step.id for step in steps]
        if not ids:
            raise ValueError("A step registry needs at least one step")
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate step ids in registry: {ids}")
        self._steps = tuple(steps)
        self._index = {step.id: position for position, step in enumerate(self._steps)}

    @property
    def steps(self) -> List[Step]:
        return list(self._steps)

    @property
    def first(self) -> Step:
        return self._steps[0]

    @property
    def last(self) -> Step:
        return self._steps[-1]

    def get(self, step_id: str) -> Step:
        try:
            return self._steps[self._index[step_id]]
        except KeyError:
            raise StepNotFound(step_id) from None

    def index_of(self, step: Any) -> int:
        step_id = step.id if isinstance(step, Step) else step
        try:
            return self._index[step_id]
        except (KeyError, TypeError):
            raise StepNotFound(step) from None

    def __contains__(self, step: Any) -> bool:
        step_id = step.id if isinstance(step, Step) else step
        return step_id in self._index

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __getitem__(self, position: int) -> Step:
        return self._steps[position]

    def to_list(self) -> List[Dict[str, Any]]:
        return [step.to_dict() for step in self._steps]


# =============================================================================
# STEP DEFINITIONS
# =============================================================================

FAMILY_MEMBERS = Step(
    id="family_members",
    title="Family Members",
    description="Who lives in your household",
)
FAMILY_DEMOGRAPHICS = Step(
    id="family_demographics",
    title="Family Demographics",
    description="Birthdate, gender and income for each member",
)
REVIEW = Step(
    id="review",
    title="Review",
    description="Review and submit",
)

DEFAULT_STEPS: List[Step] = [FAMILY_MEMBERS, FAMILY_DEMOGRAPHICS, REVIEW]


def default_registry() -> StepRegistry:
    return StepRegistry(DEFAULT_STEPS)
