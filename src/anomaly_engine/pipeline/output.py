"""
Flagged-purchase output.

Each anomaly is written as the original purchase record followed by the
network mean and standard deviation, one JSON object per line:

    {"event_type":"purchase", "timestamp":"2017-06-13 11:33:02", "id": "2", "amount": "1601.83", "mean": "29.10", "sd": "21.46"}

When the purchase was read from a log, its line is reproduced verbatim
(field order and spacing included) and the two fields are spliced in
before the closing brace. Purchases built in code fall back to json.dumps.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from anomaly_engine.ingestion.amounts import pennies_to_amount
from anomaly_engine.ingestion.schema import PurchaseEvent

logger = logging.getLogger(__name__)

MEAN_SD_TEMPLATE = ', "mean": "{mean}", "sd": "{sd}"}}'


@dataclass(frozen=True)
class AnomalyRecord:
    event: PurchaseEvent
    mean: int  # pennies
    sd: int    # pennies

    @property
    def mean_amount(self) -> str:
        return pennies_to_amount(self.mean)

    @property
    def sd_amount(self) -> str:
        return pennies_to_amount(self.sd)

    def to_dict(self) -> Dict[str, Any]:
        fields = self.event.model_dump(by_alias=True)
        fields["mean"] = self.mean_amount
        fields["sd"] = self.sd_amount
        return fields

    def to_json(self) -> str:
        line = self.event.source_line
        if line and line.endswith("}"):
            return line[:-1] + MEAN_SD_TEMPLATE.format(mean=self.mean_amount, sd=self.sd_amount)
        return json.dumps(self.to_dict())


def backup_existing_output(path: Path) -> Optional[Path]:
    """
    Move an existing output file out of the way so a previous analysis is
    never overwritten. Returns the backup path, or None if nothing existed.
    """
    if not path.exists():
        return None

    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    backup = path.with_name(f"{path.name}.{stamp}.json")
    path.rename(backup)
    logger.info(f"Existing output moved to {backup}")
    return backup


class FlaggedPurchaseWriter:
    """
    Writes AnomalyRecords to a file, newline-separated, no trailing newline.

    Usage:
        with FlaggedPurchaseWriter("log_output/flagged_purchases.json") as writer:
            writer.write(record)
    """

    def __init__(self, path: Union[str, Path], backup_existing: bool = True):
        self.path = Path(path)
        self.backup_existing = backup_existing
        self.records_written = 0
        self._fh = None

    def __enter__(self) -> "FlaggedPurchaseWriter":
        if self.backup_existing:
            backup_existing_output(self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("w", encoding="utf-8")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def write(self, record: AnomalyRecord) -> None:
        if self._fh is None:
            raise RuntimeError("FlaggedPurchaseWriter used outside of a with-block")
        if self.records_written:
            self._fh.write("\n")
        self._fh.write(record.to_json())
        self.records_written += 1
