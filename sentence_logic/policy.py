# sentence_logic/policy.py
"""Failure policy: turn a classified outcome into zero or one downstream items."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Literal, TypeVar

from sentence_logic.bounded import Faulted, Outcome, Success, TimedOut

logger = logging.getLogger(__name__)

T = TypeVar("T")

Stage = Literal["processing", "printing"]


def describe_failure(outcome: Faulted | TimedOut) -> str:
    if isinstance(outcome, TimedOut):
        return "timeout"
    return type(outcome.error).__name__


def resolve(
    outcome: Outcome[T],
    drop_errors: bool,
    *,
    sentence: str,
    stage: Stage = "processing",
    placeholder: Callable[[], T] | None = None,
) -> list[T]:
    """
    Resolve an outcome under the drop-errors policy.

    Success yields its value. A fault or timeout is logged with the sentence and
    yields ``[placeholder()]`` when errors are kept and a placeholder exists;
    otherwise the item is suppressed. Stages without a placeholder (printing)
    therefore always suppress failures.
    """
    if isinstance(outcome, Success):
        return [outcome.value]

    if isinstance(outcome, TimedOut):
        logger.warning("Timeout while %s sentence: %s", stage, sentence)
    else:
        logger.warning("Exception thrown while %s sentence: %s ---- %s", stage, sentence, outcome.message)

    if drop_errors or placeholder is None:
        return []
    return [placeholder()]
