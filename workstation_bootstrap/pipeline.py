from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent provisioning step."""

    step_id: str
    title: str

    def applies(self, state: Dict[str, Any]) -> bool:
        """False when the step's input file/directory is absent."""
        ...

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]
    skipped_steps: List[str]


def banner(index: int, total: int, title: str) -> str:
    return f"==> [{index}/{total}] {title}"


def select_steps(
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> List[Tuple[int, Step]]:
    """The (1-based position, step) pairs inside the start_at/stop_after window."""

    known = {s.step_id for s in steps}
    for name, value in (("start_at", start_at), ("stop_after", stop_after)):
        if value is not None and value not in known:
            raise ValueError(f"Unknown step for {name}: {value}")

    selected: List[Tuple[int, Step]] = []
    started = start_at is None
    for index, step in enumerate(steps, start=1):
        if not started:
            if step.step_id != start_at:
                continue
            started = True
        selected.append((index, step))
        if stop_after is not None and step.step_id == stop_after:
            break
    return selected


def run_pipeline(
    *,
    state: Dict[str, Any],
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order, skipping those without input.

    The first exception propagates and no later step runs. Nothing is
    rolled back; every step is safe to repeat, so re-running is the recovery.
    """

    window = select_steps(steps, start_at, stop_after)

    ran: List[str] = []
    skipped: List[str] = []
    total = len(steps)

    for index, step in window:
        state.setdefault("execution", {})["current_step"] = step.step_id
        logger.info(banner(index, total, step.title))

        if not step.applies(state):
            logger.info("Skipping %s (no input)", step.step_id)
            skipped.append(step.step_id)
        else:
            state = step.run(state)
            ran.append(step.step_id)

    if stop_after is not None:
        logger.info("Stopped after %s", stop_after)

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran, skipped_steps=skipped)
