from datetime import datetime, timezone

from copyflow.hashing import FINGERPRINT_LENGTH, content_hash, is_modified
from copyflow.sequencer import StepRecord


def test_hash_is_stable():
    text = "<p>Transform your operations with intelligent automation.</p>"
    assert content_hash(text) == content_hash(text)
    assert len(content_hash(text)) == FINGERPRINT_LENGTH


def test_similar_strings_hash_differently():
    variants = [f"<p>Save {n}% on operational costs this quarter.</p>" for n in range(10, 60)]
    hashes = {content_hash(v) for v in variants}
    assert len(hashes) == len(variants)
    assert content_hash("abc") != content_hash("abd")
    assert content_hash("") != content_hash(" ")


def test_is_modified_compares_against_stored_fingerprint():
    record = StepRecord(
        step_id="hero",
        generated_content="Original copy",
        completed_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        content_hash=content_hash("Original copy"),
    )
    assert not is_modified(record, "Original copy")
    assert is_modified(record, "Original copy, edited")
