"""Pure progress transition tests."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from copyflow.errors import StateViolation
from copyflow.hashing import content_hash
from copyflow.sequencer import GenerationProgress, SequencerState
from copyflow.sequencer import transitions

T1 = datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)
T2 = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)


def _fresh(definition):
    return transitions.new_progress(definition, "doc-1", now=T1)


def test_new_progress_starts_at_first_step(definition):
    progress = _fresh(definition)

    assert progress.workflow_kind == "three-step"
    assert progress.total_steps == 3
    assert progress.current_step_index == 0
    assert progress.completed_step_ids == []
    assert progress.step_records == {}
    assert progress.is_complete is False
    assert progress.completed_at is None
    assert progress.started_at == T1


def test_complete_skip_complete_finishes_workflow(definition):
    progress = _fresh(definition)
    progress = transitions.complete_step(progress, definition, "a", {"x": "1"}, "alpha", T1)
    progress = transitions.skip_step(progress, definition, T1)
    progress = transitions.complete_step(progress, definition, "c", {}, "gamma", T2)

    assert progress.completed_step_ids == ["a", "c"]
    assert progress.current_step_index == 3
    assert progress.is_complete is True
    assert progress.completed_at == T2
    assert "b" not in progress.step_records
    record = progress.step_records["a"]
    assert record.input_fields == {"x": "1"}
    assert record.content_hash == content_hash("alpha")
    assert record.was_modified is False


def test_completing_a_non_current_step_is_rejected_without_mutation(definition):
    progress = _fresh(definition)
    before = progress.model_dump_json()

    with pytest.raises(StateViolation) as excinfo:
        transitions.complete_step(progress, definition, "c", {}, "gamma")

    assert excinfo.value.operation == "complete_step"
    assert progress.model_dump_json() == before


def test_transitions_never_mutate_their_input(definition):
    progress = _fresh(definition)
    before = progress.model_dump_json()

    advanced = transitions.complete_step(progress, definition, "a", {}, "alpha")

    assert advanced is not progress
    assert progress.model_dump_json() == before


def test_index_is_monotonic_until_rewind(definition):
    progress = _fresh(definition)
    seen = [progress.current_step_index]
    for step_id in ("a", None, "c"):
        if step_id is None:
            progress = transitions.skip_step(progress, definition)
        else:
            progress = transitions.complete_step(progress, definition, step_id, {}, step_id)
        seen.append(progress.current_step_index)

    assert seen == sorted(seen) == [0, 1, 2, 3]


def test_completion_flag_tracks_index_and_restamps_after_rewind(definition):
    progress = _fresh(definition)
    progress = transitions.complete_step(progress, definition, "a", {}, "alpha", T1)
    progress = transitions.complete_step(progress, definition, "b", {}, "beta", T1)
    assert progress.is_complete is False
    progress = transitions.complete_step(progress, definition, "c", {}, "gamma", T1)
    assert progress.is_complete is True
    assert progress.completed_at == T1

    progress = transitions.rewind(progress, definition)
    assert progress.current_step_index == 2
    assert progress.is_complete is False
    assert progress.completed_at is None
    assert progress.step_records["c"].generated_content == "gamma"

    progress = transitions.complete_step(progress, definition, "c", {}, "gamma v2", T2)
    assert progress.is_complete is True
    assert progress.completed_at == T2
    assert progress.completed_step_ids == ["a", "b", "c"]


def test_rewind_at_first_step_is_rejected(definition):
    with pytest.raises(StateViolation):
        transitions.rewind(_fresh(definition), definition)


def test_regenerate_keeps_old_record_until_overwritten(definition):
    progress = _fresh(definition)
    for step_id in ("a", "b", "c"):
        progress = transitions.complete_step(progress, definition, step_id, {}, f"{step_id}-1")

    progress = transitions.regenerate_at(progress, definition, "b")
    assert progress.current_step_index == 1
    assert progress.is_complete is False
    assert progress.completed_at is None
    assert progress.step_records["b"].generated_content == "b-1"

    progress = transitions.complete_step(progress, definition, "b", {}, "b-2")
    assert progress.step_records["b"].generated_content == "b-2"
    assert progress.current_step_index == 2
    assert progress.completed_step_ids == ["a", "b", "c"]


def test_regenerate_unknown_step_is_rejected(definition):
    with pytest.raises(StateViolation):
        transitions.regenerate_at(_fresh(definition), definition, "missing")


def test_skipped_step_can_be_regenerated(definition):
    progress = _fresh(definition)
    progress = transitions.skip_step(progress, definition)
    progress = transitions.regenerate_at(progress, definition, "a")
    progress = transitions.complete_step(progress, definition, "a", {}, "alpha")

    assert progress.current_step_index == 1
    assert progress.completed_step_ids == ["a"]


def test_finish_requires_completion_and_freezes_progress(definition):
    progress = _fresh(definition)
    with pytest.raises(StateViolation):
        transitions.finish(progress)

    for _ in range(3):
        progress = transitions.skip_step(progress, definition)
    progress = transitions.finish(progress, T2)
    assert progress.finished_at == T2
    assert progress.state is SequencerState.FINISHED

    with pytest.raises(StateViolation):
        transitions.finish(progress)
    with pytest.raises(StateViolation):
        transitions.rewind(progress, definition)
    with pytest.raises(StateViolation):
        transitions.regenerate_at(progress, definition, "a")


def test_complete_when_already_complete_is_rejected(definition):
    progress = _fresh(definition)
    for _ in range(3):
        progress = transitions.skip_step(progress, definition)
    with pytest.raises(StateViolation):
        transitions.skip_step(progress, definition)
    with pytest.raises(StateViolation):
        transitions.complete_step(progress, definition, "c", {}, "late")


def test_mark_modified_flags_edited_content(definition):
    progress = _fresh(definition)
    progress = transitions.complete_step(progress, definition, "a", {}, "alpha")

    unchanged = transitions.mark_modified(progress, "a", "alpha")
    assert unchanged.step_records["a"].was_modified is False

    edited = transitions.mark_modified(progress, "a", "alpha, edited")
    assert edited.step_records["a"].was_modified is True
    assert edited.step_records["a"].content_hash == content_hash("alpha")

    with pytest.raises(StateViolation):
        transitions.mark_modified(progress, "b", "anything")


def test_progress_summary(definition):
    summary = transitions.progress_summary(None, definition)
    assert summary.state is SequencerState.NOT_STARTED
    assert summary.current_step_id == "a"

    progress = _fresh(definition)
    progress = transitions.skip_step(progress, definition)
    progress = transitions.complete_step(progress, definition, "b", {}, "beta")
    progress = transitions.mark_modified(progress, "b", "beta!")

    summary = transitions.progress_summary(progress, definition)
    assert summary.state is SequencerState.IN_PROGRESS
    assert summary.completed == 1
    assert summary.total == 3
    assert summary.percent == 33
    assert summary.current_step_id == "c"
    assert summary.current_step_name == "Step C"
    assert summary.skipped_step_ids == ["a"]
    assert summary.modified_step_ids == ["b"]


def test_progress_round_trips_through_json(definition):
    progress = _fresh(definition)
    progress = transitions.complete_step(progress, definition, "a", {"k": "v"}, "alpha", T1)
    progress = transitions.skip_step(progress, definition, T1)
    progress = transitions.complete_step(progress, definition, "c", {}, "gamma", T2)

    restored = GenerationProgress.from_json(progress.to_json())
    assert restored == progress
    assert restored.to_json() == progress.to_json()


def test_invalid_progress_is_rejected():
    with pytest.raises(ValidationError):
        GenerationProgress(
            workflow_kind="k", document_id="d", total_steps=2, current_step_index=2
        )
    with pytest.raises(ValidationError):
        GenerationProgress(
            workflow_kind="k", document_id="d", total_steps=2, current_step_index=3
        )
    with pytest.raises(ValidationError):
        GenerationProgress(
            workflow_kind="k",
            document_id="d",
            total_steps=2,
            completed_step_ids=["a", "a"],
        )


def test_transition_rejects_progress_from_other_workflow(definition):
    other = GenerationProgress(workflow_kind="other", document_id="d", total_steps=3)
    with pytest.raises(StateViolation):
        transitions.skip_step(other, definition)
