# sentence_logic/pipeline.py
"""
Sentence-to-logic batch pipeline.

Read -> extract sentence -> bounded(parse + filter + generate) -> failure policy
-> bounded(format) -> failure policy -> collect -> write once.

Parallel strategy
- Records are split into deterministic contiguous partitions (part_0000, ...).
- Partitions run on a ThreadPoolExecutor; each worker handles its partition
  sequentially and each record is processed independently of all others.
- Every call into the parser, the generator or the formatter runs under the
  bounded executor, so one hanging or failing record cannot stall the batch.

Ordering
- Results are collected in partition completion order. With preserve_order the
  collected results are re-sorted by input position before writing.
"""

from __future__ import annotations

import concurrent.futures as cf
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from sentence_logic.bounded import BoundedExecutor, Faulted, Success, TimedOut, run_bounded
from sentence_logic.config import DEFAULT_FORMAT_TIMEOUT_S, DEFAULT_UNIT_TIMEOUT_S, StepConfig
from sentence_logic.errors import OutputWriteError
from sentence_logic.formatting import format_output_line
from sentence_logic.logical_forms import LogicalFormGenerator, generate, load_generator
from sentence_logic.parser import DependencyParser, get_parser, parse
from sentence_logic.policy import Stage, describe_failure, resolve
from sentence_logic.records import ParsedRecord, Record, make_records, read_lines
from sentence_logic.run_log import JsonlLogger, elapsed_ms
from sentence_logic.run_manifest import clear_in_progress, mark_in_progress, write_params_manifest
from sentence_logic.summary import RecordResult, RunSummary, build_summary, log_summary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Partition:
    partition_id: str
    records: list[Record]


@dataclass(frozen=True)
class RecordProcessor:
    """Everything needed to take one record to its terminal state."""

    parser: DependencyParser
    generator: LogicalFormGenerator
    drop_errors: bool = True
    unit_timeout_s: float = DEFAULT_UNIT_TIMEOUT_S
    format_timeout_s: float = DEFAULT_FORMAT_TIMEOUT_S
    executor: BoundedExecutor | None = None
    run_log: JsonlLogger | None = None

    def _parse_and_generate(self, record: Record) -> ParsedRecord:
        tree = parse(self.parser, record.sentence)
        try:
            logical_form = generate(self.generator, tree)
        except Exception:
            if tree is not None:
                logger.debug("Generator failed on sentence: %s\n%s", record.sentence, tree.render())
            raise
        return ParsedRecord(record=record, logical_form=logical_form, admitted=tree is not None)

    def _audit(self, record: Record, stage: Stage, outcome: Faulted | TimedOut, action: str) -> None:
        if self.run_log is None:
            return
        self.run_log.log({
            "event": "record_failure",
            "position": record.position,
            "sentence": record.sentence,
            "stage": stage,
            "failure": describe_failure(outcome),
            "message": outcome.message if isinstance(outcome, Faulted) else None,
            "action": action,
        })

    def process(self, record: Record) -> RecordResult:
        outcome = run_bounded(self.unit_timeout_s, lambda: self._parse_and_generate(record), self.executor)
        parsed = resolve(
            outcome,
            self.drop_errors,
            sentence=record.sentence,
            stage="processing",
            placeholder=lambda: ParsedRecord(record=record),
        )

        if isinstance(outcome, Success):
            if outcome.value.logical_form is not None:
                status = "success"
            elif outcome.value.admitted:
                status = "no_form"
            else:
                status = "no_parse"
        else:
            status = "placeholder" if parsed else "dropped"
            self._audit(record, "processing", outcome, status)
            if not parsed:
                return RecordResult(
                    position=record.position,
                    sentence=record.sentence,
                    status="dropped",
                    stage="processing",
                    failure=describe_failure(outcome),
                )

        item = parsed[0]
        fmt_outcome = run_bounded(self.format_timeout_s, lambda: format_output_line(item), self.executor)
        lines = resolve(fmt_outcome, self.drop_errors, sentence=record.sentence, stage="printing")
        if not isinstance(fmt_outcome, Success):
            self._audit(record, "printing", fmt_outcome, "dropped")
            return RecordResult(
                position=record.position,
                sentence=record.sentence,
                status="format_failed",
                stage="printing",
                failure=describe_failure(fmt_outcome),
            )

        return RecordResult(
            position=record.position,
            sentence=record.sentence,
            status=status,
            output_line=lines[0],
            stage=None if status in ("success", "no_parse", "no_form") else "processing",
            failure=None if isinstance(outcome, Success) else describe_failure(outcome),
        )


def make_partitions(records: Sequence[Record], partition_size: int) -> list[Partition]:
    if partition_size <= 0:
        raise ValueError("partition_size must be > 0")
    return [
        Partition(partition_id=f"part_{i:04d}", records=list(records[start : start + partition_size]))
        for i, start in enumerate(range(0, len(records), partition_size))
    ]


def run_partition(partition: Partition, processor: RecordProcessor) -> list[RecordResult]:
    t0 = time.time()
    results = [processor.process(record) for record in partition.records]
    logger.debug(
        "Partition %s: %d records in %d ms", partition.partition_id, len(results), elapsed_ms(t0, time.time())
    )
    return results


def convert_records(
    records: Sequence[Record],
    processor: RecordProcessor,
    *,
    workers: int = 1,
    partition_size: int = 1000,
    preserve_order: bool = False,
) -> list[RecordResult]:
    """Process every record in parallel partitions and collect all results."""
    partitions = make_partitions(records, partition_size)
    logger.info("Processing %d records in %d partitions with %d workers", len(records), len(partitions), workers)

    results: list[RecordResult] = []
    with cf.ThreadPoolExecutor(max_workers=workers, thread_name_prefix="partition") as ex:
        futs = {ex.submit(run_partition, p, processor): p for p in partitions}
        for fut in cf.as_completed(futs):
            results.extend(fut.result())

    if preserve_order:
        results.sort(key=lambda r: r.position)
    return results


def write_output(path: Path, lines: Sequence[str]) -> None:
    """Write all output lines in one pass. Any I/O failure is fatal."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", errors="surrogateescape", newline="\n") as f:
            for line in lines:
                f.write(line + "\n")
    except OSError as exc:
        raise OutputWriteError(f"Cannot write output file {path}: {exc}") from exc


def run_sentence_to_logic(
    config: StepConfig,
    *,
    parser: DependencyParser | None = None,
    generator: LogicalFormGenerator | None = None,
    command: str | None = None,
) -> RunSummary:
    """Convert every sentence of ``config.sentences_file`` and write ``config.output_file``."""
    t0 = time.time()
    if parser is None:
        spacy_parser = get_parser(config.parser_model)
        spacy_parser.load()
        parser = spacy_parser
    generator = generator if generator is not None else load_generator(config.logical_forms)

    records = make_records(read_lines(config.sentences_file))

    try:
        mark_in_progress(config.output_file)
    except OSError as exc:
        raise OutputWriteError(f"Cannot create output directory for {config.output_file}: {exc}") from exc

    run_log = JsonlLogger(config.run_log) if config.run_log else None
    if run_log is not None:
        run_log.log({"event": "run_start", **config.as_params()})

    processor = RecordProcessor(
        parser=parser,
        generator=generator,
        drop_errors=config.drop_errors,
        unit_timeout_s=config.unit_timeout_s,
        format_timeout_s=config.format_timeout_s,
        executor=BoundedExecutor(config.max_units),
        run_log=run_log,
    )
    results = convert_records(
        records,
        processor,
        workers=config.workers,
        partition_size=config.partition_size,
        preserve_order=config.preserve_order,
    )

    write_output(config.output_file, [r.output_line for r in results if r.output_line is not None])

    summary = build_summary(results, elapsed_ms=elapsed_ms(t0, time.time()))
    log_summary(summary)
    if run_log is not None:
        run_log.log({"event": "run_end", **summary.as_dict()})

    write_params_manifest(
        output_file=config.output_file,
        params=config.as_params(),
        summary=summary.as_dict(),
        command=command,
        repo_root=Path.cwd(),
    )
    clear_in_progress(config.output_file)
    logger.info("Wrote %d lines to %s", summary.n_output, config.output_file)
    return summary
