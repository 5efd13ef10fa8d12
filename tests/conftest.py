from datetime import datetime, timedelta, timezone

import pytest

from copyflow.workflows import WorkflowDefinition, WorkflowStep


@pytest.fixture
def definition() -> WorkflowDefinition:
    return WorkflowDefinition(
        kind="three-step",
        name="Three Step",
        steps=[
            WorkflowStep(id="a", name="Step A"),
            WorkflowStep(id="b", name="Step B"),
            WorkflowStep(id="c", name="Step C"),
        ],
        section_separator="\n<hr />\n",
    )


@pytest.fixture
def clock():
    """Monotonic fake clock advancing one minute per call."""

    start = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    ticks = {"n": 0}

    def _now() -> datetime:
        ticks["n"] += 1
        return start + timedelta(minutes=ticks["n"])

    return _now
