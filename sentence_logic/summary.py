# sentence_logic/summary.py
"""
Run accounting derived from per-record results after collection.

Counts are computed once every partition has finished, so workers never share
counters.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

import polars as pl

logger = logging.getLogger(__name__)

Status = Literal["success", "no_parse", "no_form", "placeholder", "dropped", "format_failed"]
STATUSES: tuple[Status, ...] = ("success", "no_parse", "no_form", "placeholder", "dropped", "format_failed")

LOSS_WARNING_PCT = 10.0


@dataclass(frozen=True)
class RecordResult:
    """Terminal state of one record."""

    position: int
    sentence: str
    status: Status
    output_line: str | None = None
    stage: str | None = None
    failure: str | None = None


@dataclass(frozen=True)
class RunSummary:
    n_input: int
    n_output: int
    status_counts: dict[str, int] = field(default_factory=dict)
    elapsed_ms: int = 0

    @property
    def n_lost(self) -> int:
        return self.n_input - self.n_output

    def as_dict(self) -> dict[str, object]:
        return {
            "n_input": self.n_input,
            "n_output": self.n_output,
            "status_counts": dict(self.status_counts),
            "elapsed_ms": self.elapsed_ms,
        }


def summarize_results(results: Sequence[RecordResult]) -> pl.DataFrame:
    """One row per status with its record count, statuses that never occurred included."""
    observed = pl.DataFrame(
        {"status": [r.status for r in results]},
        schema={"status": pl.Utf8},
    )
    counts = observed.group_by("status").agg(pl.len().alias("n_records"))
    return (
        pl.DataFrame({"status": list(STATUSES), "order": list(range(len(STATUSES)))})
        .join(counts, on="status", how="left")
        .sort("order")
        .select([pl.col("status"), pl.col("n_records").fill_null(0).cast(pl.Int64)])
    )


def build_summary(results: Sequence[RecordResult], elapsed_ms: int = 0) -> RunSummary:
    table = summarize_results(results)
    counts = dict(zip(table["status"].to_list(), table["n_records"].to_list()))
    n_output = sum(1 for r in results if r.output_line is not None)
    return RunSummary(n_input=len(results), n_output=n_output, status_counts=counts, elapsed_ms=elapsed_ms)


def log_summary(summary: RunSummary) -> None:
    row_change = summary.n_output - summary.n_input
    row_pct = 100 * row_change / summary.n_input if summary.n_input > 0 else 0.0
    logger.info("📊 input → output: %+d records (%+.1f%%)", row_change, row_pct)
    for status, n in summary.status_counts.items():
        if n:
            logger.info("  %s: %d", status, n)
    if abs(row_pct) > LOSS_WARNING_PCT:
        logger.warning("⚠️  %d of %d records produced no output line", summary.n_lost, summary.n_input)
