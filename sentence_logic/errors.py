# sentence_logic/errors.py
"""Exception types raised by the sentence-to-logic step.

Per-record faults are never raised out of the pipeline; they are captured by the
bounded executor and resolved by the failure policy. Only configuration and
destination errors abort a run.
"""

from __future__ import annotations


class ConfigError(ValueError):
    """Invalid or incomplete step configuration."""


class OutputFormatError(ValueError):
    """Logical-form text that would corrupt the tab-delimited output schema."""


class UnitCapacityError(RuntimeError):
    """No bounded-unit slot became free before the deadline."""


class OutputWriteError(OSError):
    """Destination file could not be created or written."""
