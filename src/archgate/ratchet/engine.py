"""Ratchet engine: capture, check, tighten, recapture.

State machine over one Baseline value::

    Uninitialized --capture--> Captured --capture/recapture/tighten--> Captured

``check`` never changes the baseline and never tightens it; tightening is a
separate, deliberate operation. With only ``tighten`` and ``recapture``
applied, every per-file count is non-increasing over the baseline's life.
"""

from datetime import datetime, timezone
from typing import Optional

from ..exceptions import BaselineMissingError
from ..logging_config import get_logger
from .models import (
    Baseline,
    CheckResult,
    Improvement,
    MetricCounts,
    RatchetState,
    RecaptureResult,
    Regression,
)

logger = get_logger(__name__)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def state_of(baseline: Optional[Baseline]) -> RatchetState:
    return RatchetState.UNINITIALIZED if baseline is None else RatchetState.CAPTURED


def capture(
    counts: MetricCounts,
    commit_ref: str = "unknown",
    timestamp: Optional[str] = None,
) -> Baseline:
    """Snapshot current per-file counts into a fresh baseline."""
    baseline = Baseline.create(counts, timestamp=timestamp or utc_timestamp(), commit_ref=commit_ref)
    logger.info(
        f"Captured baseline at {commit_ref}: "
        + ", ".join(f"{m}={t}" for m, t in baseline.totals.items())
    )
    return baseline


def check(baseline: Optional[Baseline], counts: MetricCounts) -> CheckResult:
    """Compare current counts with the baseline.

    Every file in either side is compared for each metric the baseline
    tracks; a file missing from one side counts as 0 there. Metrics only
    present in the current run are reported as untracked.
    """
    if baseline is None:
        return CheckResult(
            state=RatchetState.UNINITIALIZED,
            recommendation="no baseline to compare against; run `archgate capture`",
        )

    regressions: list[Regression] = []
    improvements: list[Improvement] = []
    for metric in baseline.tracked_metrics:
        old_files = baseline.metrics.get(metric, {})
        new_files = counts.get(metric, {})
        for file_path in sorted(set(old_files) | set(new_files)):
            old = old_files.get(file_path, 0)
            new = new_files.get(file_path, 0)
            if new > old:
                regressions.append(Regression(file=file_path, metric=metric, old=old, new=new))
            elif new < old:
                improvements.append(Improvement(file=file_path, metric=metric, old=old, new=new))

    untracked = tuple(sorted(m for m in counts if m not in baseline.metrics))

    for r in regressions:
        logger.warning(f"Regression {r.metric} in {r.file}: {r.old} -> {r.new}")
    for i in improvements:
        logger.info(f"Improved {i.metric} in {i.file}: {i.old} -> {i.new}")

    if regressions:
        recommendation = "fix the listed files so their counts return to the baseline"
    elif improvements:
        recommendation = "counts improved; run `archgate recapture` or `archgate tighten` to lock them in"
    elif untracked:
        recommendation = f"metrics not in baseline: {', '.join(untracked)}; run `archgate recapture` to track them"
    else:
        recommendation = None

    return CheckResult(
        state=RatchetState.CAPTURED,
        regressions=tuple(regressions),
        improvements=tuple(improvements),
        untracked_metrics=untracked,
        recommendation=recommendation,
    )


def tighten(baseline: Optional[Baseline], amount: int, timestamp: Optional[str] = None) -> Baseline:
    """Lower every per-file count by ``amount``, floored at zero.

    Zero entries are pruned and totals recomputed. The commit reference is
    kept; the timestamp records the tightening.

    Raises:
        BaselineMissingError: when nothing has been captured
        ValueError: when ``amount`` is negative
    """
    if baseline is None:
        raise BaselineMissingError("tighten")
    if amount < 0:
        raise ValueError(f"tighten amount must be non-negative, got {amount}")

    lowered = {
        metric: {path: max(0, n - amount) for path, n in files.items()}
        for metric, files in baseline.metrics.items()
    }
    tightened = Baseline.create(lowered, timestamp=timestamp or utc_timestamp(), commit_ref=baseline.commit_ref)
    logger.info(
        f"Tightened baseline by {amount}: "
        + ", ".join(f"{m} {baseline.totals.get(m, 0)}->{t}" for m, t in tightened.totals.items())
    )
    return tightened


def recapture(
    baseline: Optional[Baseline],
    counts: MetricCounts,
    commit_ref: str = "unknown",
    timestamp: Optional[str] = None,
) -> RecaptureResult:
    """Re-snapshot after an improvement; refused while any regression exists.

    Raises:
        BaselineMissingError: when nothing has been captured
    """
    if baseline is None:
        raise BaselineMissingError("recapture")

    result = check(baseline, counts)
    if not result.passed:
        logger.warning(f"Recapture refused: {len(result.regressions)} regressions")
        return RecaptureResult(baseline=baseline, check=result, applied=False)

    return RecaptureResult(
        baseline=capture(counts, commit_ref=commit_ref, timestamp=timestamp),
        check=result,
        applied=True,
    )
