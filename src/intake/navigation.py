"""
Navigation Controller.

Position and progress are pure functions of the current step and the
ordered step list. NavigationController adds the linear next/previous
transitions issued by the navigation shell.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

from intake.exceptions import StepNotFound
from intake.step_registry import Step, StepRegistry

logger = logging.getLogger(__name__)


def _matches(candidate: Any, step: Any) -> bool:
    if candidate == step:
        return True
    # A bare id matches the Step carrying it, in either direction.
    candidate_id = candidate.id if isinstance(candidate, Step) else candidate
    step_id = step.id if isinstance(step, Step) else step
    return candidate_id == step_id


def current_step_index(step: Any, steps: Union[Sequence[Any], StepRegistry]) -> int:
    """
    Return the position of ``step`` in ``steps``.

    Raises:
        StepNotFound: if the step is not in the list
    """
    if isinstance(steps, StepRegistry):
        return steps.index_of(step)
    for position, candidate in enumerate(steps):
        if _matches(candidate, step):
            return position
    raise StepNotFound(step)


def progress_percent(step: Any, steps: Union[Sequence[Any], StepRegistry]) -> float:
    """Progress through the wizard as ``(index + 1) / len(steps) * 100``."""
    position = current_step_index(step, steps)
    return (position + 1) / len(steps) * 100


class NavigationController:
    """
    Tracks the current step of a linear wizard.

    next() and previous() return True when they moved and False at the
    ends of the registry; there is no wrap-around.
    """

    def __init__(self, registry: StepRegistry, current: Optional[Union[Step, str]] = None):
        self.registry = registry
        self._current = registry.first if current is None else registry.get(
            current.id if isinstance(current, Step) else current
        )

    @property
    def current(self) -> Step:
        return self._current

    @property
    def index(self) -> int:
        return self.registry.index_of(self._current)

    @property
    def percent(self) -> float:
        return progress_percent(self._current, self.registry)

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == len(self.registry) - 1

    def can_go_next(self) -> bool:
        return not self.is_last

    def can_go_previous(self) -> bool:
        return not self.is_first

    def next(self) -> bool:
        if not self.can_go_next():
            logger.debug(f"[INTAKE] Cannot go next: already at last step ({self._current.id})")
            return False
        return self._move_to(self.index + 1)

    def previous(self) -> bool:
        if not self.can_go_previous():
            logger.debug(f"[INTAKE] Cannot go previous: already at first step ({self._current.id})")
            return False
        return self._move_to(self.index - 1)

    def go_to(self, step: Union[Step, str]) -> bool:
        return self._move_to(self.registry.index_of(step))

    def reset(self) -> None:
        self._move_to(0)

    def _move_to(self, position: int) -> bool:
        old = self._current
        self._current = self.registry[position]
        if old != self._current:
            logger.info(f"[INTAKE] Navigated: {old.id} -> {self._current.id}")
        return True
