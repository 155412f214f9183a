"""
Normalized event values handed to the engine.

Each JSON line of the batch/stream logs becomes one of:
    {"D": "3", "T": "50"}                                              -> ParameterInit
    {"event_type": "befriend", "timestamp": ..., "id1": ..., "id2": ...} -> BefriendEvent
    {"event_type": "unfriend", "timestamp": ..., "id1": ..., "id2": ...} -> UnfriendEvent
    {"event_type": "purchase", "timestamp": ..., "id": ..., "amount": ...} -> PurchaseEvent

Timestamps stay strings: the engine only ever compares them lexically.
"""
import json
import re
from typing import Dict, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator

from anomaly_engine.exceptions import MalformedEventError
from anomaly_engine.ingestion.amounts import amount_to_pennies

EVENT_TYPE_KEY = "event_type"
AMOUNT_PATTERN = re.compile(r"^\d+\.\d{2}$")


class Event(BaseModel):
    # Unknown upstream fields are kept so they survive into flagged output
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    _source_line: Optional[str] = PrivateAttr(default=None)

    @property
    def source_line(self) -> Optional[str]:
        """The raw JSON line this event was parsed from, if any."""
        return self._source_line

    def attach_source(self, line: str) -> "Event":
        self._source_line = line
        return self


class ParameterInit(Event):
    """Run parameters; only the first one in the batch log takes effect."""
    degrees_of_separation: int = Field(..., alias="D", ge=1)
    threshold: int = Field(..., alias="T", ge=1)


class FriendshipEvent(Event):
    timestamp: str
    id1: str
    id2: str

    @field_validator("id1", "id2", mode="before")
    def force_string_id(cls, v):
        return str(v)


class BefriendEvent(FriendshipEvent):
    event_type: Literal["befriend"] = "befriend"


class UnfriendEvent(FriendshipEvent):
    event_type: Literal["unfriend"] = "unfriend"


class PurchaseEvent(Event):
    event_type: Literal["purchase"] = "purchase"
    timestamp: str
    id: str
    amount: str

    @field_validator("id", mode="before")
    def force_string_id(cls, v):
        return str(v)

    @field_validator("amount")
    def amount_must_have_two_decimals(cls, v):
        if not AMOUNT_PATTERN.match(v.strip()):
            raise ValueError(f"Amount must have exactly two fractional digits, got {v!r}")
        return v

    @property
    def amount_pennies(self) -> int:
        return amount_to_pennies(self.amount)


AnyEvent = Union[ParameterInit, BefriendEvent, UnfriendEvent, PurchaseEvent]

EVENT_MODELS: Dict[str, Type[Event]] = {
    "befriend": BefriendEvent,
    "unfriend": UnfriendEvent,
    "purchase": PurchaseEvent,
}


def parse_event(line: str) -> AnyEvent:
    """
    Parse one JSON line into an event model.

    Records without an event_type are parameter records.

    Raises:
        MalformedEventError: invalid JSON, unknown event_type, or fields
            that fail validation.
    """
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as e:
        raise MalformedEventError(f"Invalid JSON: {e}", line) from e

    if not isinstance(payload, dict):
        raise MalformedEventError("Expected a JSON object", line)

    event_type = payload.get(EVENT_TYPE_KEY)
    if event_type is None:
        model = ParameterInit
    else:
        model = EVENT_MODELS.get(event_type)
        if model is None:
            raise MalformedEventError(f"Unknown event_type: {event_type!r}", line)

    try:
        event = model.model_validate(payload)
    except ValidationError as e:
        raise MalformedEventError(
            f"Invalid {model.__name__} record: {e.error_count()} validation error(s)", line
        ) from e

    return event.attach_source(line.strip())
