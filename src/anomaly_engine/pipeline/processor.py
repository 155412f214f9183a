"""
Batch + Stream Processing Runs.

A run consumes two logs strictly one after the other:

    1. batch log  -> parameters + history; seeds the graph and purchase
                     windows, never produces output
    2. stream log -> same events, but every purchase is checked against its
                     network first; anomalies go to the flagged output

After the batch log the parameters D and T must be known; otherwise the
run fails with ConfigurationError instead of running with empty windows.
"""

import logging
import time
from contextlib import nullcontext
from pathlib import Path
from typing import Iterable, List, Optional, Union

from anomaly_engine.config import settings
from anomaly_engine.core.context import RunContext
from anomaly_engine.core.evaluator import AnomalyEvaluator
from anomaly_engine.ingestion.event_reader import EventReader
from anomaly_engine.pipeline.dispatcher import EventDispatcher
from anomaly_engine.pipeline.output import AnomalyRecord, FlaggedPurchaseWriter

logger = logging.getLogger(__name__)

LogSource = Union[str, Path, Iterable[str]]


class AnomalyDetectionRun:
    """
    One end-to-end detection run over a batch log and a stream log.

    Usage:
        run = AnomalyDetectionRun()
        records = run.run(
            "log_input/batch_log.json",
            "log_input/stream_log.json",
            "log_output/flagged_purchases.json",
        )
    """

    def __init__(
        self,
        context: Optional[RunContext] = None,
        evaluator: Optional[AnomalyEvaluator] = None,
        backup_existing_output: Optional[bool] = None,
    ):
        self.context = context or RunContext()
        self.evaluator = evaluator or AnomalyEvaluator(
            min_purchases=settings.MIN_PURCHASES_FOR_ANOMALY,
            sigma_multiplier=settings.SIGMA_MULTIPLIER,
        )
        self.dispatcher = EventDispatcher(self.context, self.evaluator)
        self.backup_existing_output = (
            settings.BACKUP_EXISTING_OUTPUT if backup_existing_output is None else backup_existing_output
        )
        self.skipped_rows = 0

    def process_batch(self, source: LogSource) -> None:
        """
        Seed state from the batch log (no anomaly evaluation).

        Raises:
            ConfigurationError: D/T still unknown after the whole log.
        """
        start_time = time.time()
        reader = EventReader(source)
        logger.info(f"Processing batch log {reader.name}...")

        for event in reader:
            self.dispatcher.dispatch(event, evaluate=False)

        self.skipped_rows += reader.skipped_count
        self.context.parameters.require()

        logger.info(
            f"✅ Batch done: {reader.event_count} events, {reader.skipped_count} skipped, "
            f"{len(self.context.directory)} users ({time.time() - start_time:.2f}s)"
        )

    def process_stream(
        self,
        source: LogSource,
        output_path: Optional[Union[str, Path]] = None,
    ) -> List[AnomalyRecord]:
        """
        Evaluate every purchase of the stream log against its network.

        Returns:
            Anomaly records in arrival order (also written to `output_path`
            when given).
        """
        self.context.parameters.require()

        start_time = time.time()
        reader = EventReader(source)
        logger.info(f"Processing stream log {reader.name}...")

        writer_cm = (
            FlaggedPurchaseWriter(output_path, backup_existing=self.backup_existing_output)
            if output_path is not None
            else nullcontext()
        )

        records: List[AnomalyRecord] = []
        with writer_cm as writer:
            for record in self.dispatcher.dispatch_all(reader, evaluate=True):
                records.append(record)
                if writer is not None:
                    writer.write(record)

        self.skipped_rows += reader.skipped_count
        logger.info(
            f"✅ Stream done: {reader.event_count} events, {reader.skipped_count} skipped, "
            f"{len(records)} anomalies ({time.time() - start_time:.2f}s)"
        )
        if output_path is not None:
            logger.info(f"   - Flagged purchases: {output_path}")

        return records

    def run(
        self,
        batch_source: LogSource,
        stream_source: LogSource,
        output_path: Optional[Union[str, Path]] = None,
    ) -> List[AnomalyRecord]:
        self.process_batch(batch_source)
        return self.process_stream(stream_source, output_path)
