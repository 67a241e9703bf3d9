"""Build outcome classification.

A build's verdict sits on an ordered scale where SUCCESS is the best value.
Classification collapses that scale into passing (>= SUCCESS) and failing
(everything worse), then combines the current and previous verdicts into one
of four outcomes:

    previous     current    outcome
    (none)       pass       SUCCESS
    (none)       fail       FAILURE
    pass         pass       SUCCESS
    pass         fail       FAILURE
    fail         pass       RECOVERED
    fail         fail       CONTINUOUS_FAILURE
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from buildfeed_core.models import BuildRecord


class Verdict(IntEnum):
    """Result of a single build, ordered best first (lower is better)."""

    SUCCESS = 0
    UNSTABLE = 1
    FAILURE = 2
    NOT_BUILT = 3
    ABORTED = 4

    @classmethod
    def parse(cls, text: str) -> Verdict:
        """Parse a verdict name such as ``"success"`` or ``"NOT_BUILT"``."""
        key = (text or "").strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            choices = ", ".join(v.name for v in cls)
            raise ValueError(f"Unknown build verdict: {text!r}. Expected one of: {choices}.") from None

    def is_better_or_equal(self, other: Verdict) -> bool:
        return self.value <= other.value

    @property
    def is_passing(self) -> bool:
        return self.is_better_or_equal(Verdict.SUCCESS)


class BuildOutcome(Enum):
    """Four-way classification of a build relative to the one before it.

    The string values double as keys in the ``templates`` and ``notify``
    sections of .buildfeed.yml.
    """

    SUCCESS = "success"
    FAILURE = "failure"
    CONTINUOUS_FAILURE = "continuous_failure"
    RECOVERED = "recovered"


def classify(current: Verdict, previous: Verdict | None = None) -> BuildOutcome:
    """Classify the current verdict against the previous build's verdict, if any."""
    if previous is None or previous.is_passing:
        return BuildOutcome.SUCCESS if current.is_passing else BuildOutcome.FAILURE
    # Fail -> Success = Recovered, Fail -> Fail = ContinuousFailure
    return BuildOutcome.RECOVERED if current.is_passing else BuildOutcome.CONTINUOUS_FAILURE


def classify_build(build: BuildRecord) -> BuildOutcome:
    previous = build.previous.verdict if build.previous is not None else None
    return classify(build.verdict, previous)
