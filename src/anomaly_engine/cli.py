"""
Command-line entry point.

    anomaly-engine log_input/batch_log.json log_input/stream_log.json log_output/flagged_purchases.json

Paths left out fall back to the configured defaults (see config.py).
Exit codes: 0 success, 1 missing input file, 2 configuration error.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from anomaly_engine.config import settings
from anomaly_engine.diagnostics import directory_frame, summarize_directory
from anomaly_engine.exceptions import ConfigurationError
from anomaly_engine.pipeline.processor import AnomalyDetectionRun

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anomaly-engine",
        description="Flag purchases that are anomalous relative to the buyer's social network",
    )
    parser.add_argument("batch_log", nargs="?", default=settings.BATCH_LOG_PATH,
                        help=f"Batch (history) log with D/T parameters (default: {settings.BATCH_LOG_PATH})")
    parser.add_argument("stream_log", nargs="?", default=settings.STREAM_LOG_PATH,
                        help=f"Stream log to check for anomalies (default: {settings.STREAM_LOG_PATH})")
    parser.add_argument("flagged_output", nargs="?", default=settings.FLAGGED_PURCHASES_PATH,
                        help=f"Where flagged purchases are written (default: {settings.FLAGGED_PURCHASES_PATH})")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging verbosity")
    parser.add_argument("--summary", action="store_true",
                        help="Log a snapshot of the user directory after the run")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        filename=settings.LOG_FILE,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    for path in (args.batch_log, args.stream_log):
        if not Path(path).is_file():
            logger.error(f"❌ Input file not found: {path}")
            return 1

    run = AnomalyDetectionRun()
    try:
        records = run.run(args.batch_log, args.stream_log, args.flagged_output)
    except ConfigurationError as e:
        logger.error(f"❌ Configuration error: {e}")
        return 2

    logger.info(f"🎯 {len(records)} flagged purchases written to {args.flagged_output}")
    logger.info(f"Dispatch stats: {run.dispatcher.stats.summary()}")

    if args.summary:
        frame = directory_frame(run.context)
        logger.info(f"Directory summary: {summarize_directory(frame)}")
        logger.info("\n" + frame.to_string(index=False))

    return 0


if __name__ == "__main__":
    sys.exit(main())
