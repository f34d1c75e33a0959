# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-13
# Description: test_change_detector.py
# -----------------------------------------------------------------------------
import time

import pytest

from detection.ChangeDetector import ChangeDetector, levenshtein
from errors.VectorizationErrors import ConfigError


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("", "", 0),
        ("abc", "", 3),
        ("", "abc", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("same", "same", 0),
        ("prefix-a-suffix", "prefix-bb-suffix", 2),
    ],
)
def test_levenshtein(a, b, expected):
    assert levenshtein(a, b) == expected
    assert levenshtein(b, a) == expected


def test_identical_text_is_not_reembedded():
    assert ChangeDetector().should_reembed("the same words", "the same words") is False


def test_empty_old_text_always_reembeds():
    detector = ChangeDetector()
    assert detector.should_reembed("", "anything") is True


def test_change_ratio_above_threshold_reembeds():
    detector = ChangeDetector(threshold=0.2)
    old = "a" * 100
    new = "b" * 25 + "a" * 75  # 25 substitutions over 100 chars

    assert detector.change_ratio(old, new) == pytest.approx(0.25)
    assert detector.should_reembed(old, new) is True


def test_small_edit_is_below_threshold():
    detector = ChangeDetector(threshold=0.2)
    old = "a" * 100
    new = "b" * 10 + "a" * 90

    assert detector.should_reembed(old, new) is False


def test_ratio_equal_to_threshold_does_not_reembed():
    detector = ChangeDetector(threshold=0.2)
    assert detector.should_reembed("a" * 10, "bb" + "a" * 8) is False


def test_no_normalisation_is_applied():
    detector = ChangeDetector(threshold=0.2)
    assert detector.change_ratio("Hello", "hello") == pytest.approx(0.2)
    assert detector.should_reembed("ab", "AB") is True


@pytest.mark.parametrize("threshold", [0.0, 1.0, -0.1, 1.5])
def test_threshold_must_be_between_zero_and_one(threshold):
    with pytest.raises(ConfigError):
        ChangeDetector(threshold=threshold)


def test_long_note_with_edits_at_both_ends_is_fast():
    body = "the van needs booking for friday and the plumber is due at nine " * 1000
    old = "a" + body + "z"
    new = "b" + body + "y"

    started = time.perf_counter()
    decision = ChangeDetector(threshold=0.2).should_reembed(old, new)
    elapsed = time.perf_counter() - started

    assert levenshtein(old, new) == 2
    assert decision is False
    assert elapsed < 2.0


def test_long_rewrite_is_detected():
    old = "first draft of the site visit notes " * 500
    new = "completely rewritten summary after the call " * 500
    assert ChangeDetector().should_reembed(old, new) is True
