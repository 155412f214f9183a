"""
JSON-lines event source for the batch and stream logs.
Yields events one by one, in file order, without loading the file into RAM.
"""
import logging
from pathlib import Path
from typing import Iterable, Iterator, Union

from anomaly_engine.exceptions import MalformedEventError
from anomaly_engine.ingestion.schema import AnyEvent, parse_event

logger = logging.getLogger(__name__)


class EventReader:
    """
    Iterates the events of one log.

    `source` is either a path to a JSON-lines file or an in-memory iterable
    of lines (handy for tests and for piping). Blank lines are ignored;
    malformed lines are logged and skipped so one bad record never aborts
    a run.

    Usage:
        reader = EventReader("log_input/batch_log.json")
        for event in reader:
            ...
        print(reader.event_count, reader.skipped_count)
    """

    def __init__(self, source: Union[str, Path, Iterable[str]]):
        if isinstance(source, (str, Path)):
            self.path = Path(source)
            self._lines = None
            self.name = str(self.path)
        else:
            self.path = None
            self._lines = source
            self.name = "<lines>"

        self.event_count = 0
        self.skipped_count = 0

    def __iter__(self) -> Iterator[AnyEvent]:
        if self.path is None:
            yield from self._parse(self._lines)
            return

        with self.path.open("r", encoding="utf-8") as fh:
            yield from self._parse(fh)

    def _parse(self, lines: Iterable[str]) -> Iterator[AnyEvent]:
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue

            try:
                event = parse_event(line)
            except MalformedEventError as e:
                # In a real feed you'd also dead-letter the row
                self.skipped_count += 1
                logger.warning(f"Skipping bad row {self.name}:{line_number}: {e}")
                continue

            self.event_count += 1
            yield event
