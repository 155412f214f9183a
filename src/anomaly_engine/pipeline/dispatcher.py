"""
Event Dispatcher: applies events to the run state in arrival order.

    ParameterInit  -> set D/T (first one wins, later ones ignored + warned)
    Befriend       -> both users befriend each other
    Unfriend       -> both users unfriend each other
    Purchase       -> [evaluate against the network window] then record

Evaluation is requested per call: batch (history) events only seed state,
stream events are also checked for anomalies. A purchase is recorded in the
buyer's own window only after its evaluation, so it never counts toward its
own baseline.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Iterator, Optional

from anomaly_engine.core.context import RunContext
from anomaly_engine.core.evaluator import AnomalyEvaluator
from anomaly_engine.core.network import NetworkAggregator
from anomaly_engine.ingestion.schema import (
    AnyEvent,
    BefriendEvent,
    ParameterInit,
    PurchaseEvent,
    UnfriendEvent,
)
from anomaly_engine.pipeline.output import AnomalyRecord

logger = logging.getLogger(__name__)


@dataclass
class DispatchStats:
    """Running counters for one dispatcher."""
    parameter_records: int = 0
    ignored_parameter_records: int = 0
    befriend_events: int = 0
    unfriend_events: int = 0
    purchase_events: int = 0
    evaluated_purchases: int = 0
    anomalies: int = 0
    discarded_purchases: int = 0
    unsupported_events: int = 0

    def summary(self) -> Dict[str, int]:
        return asdict(self)


class EventDispatcher:
    """
    Usage:
        context = RunContext()
        dispatcher = EventDispatcher(context)
        for event in EventReader("log_input/stream_log.json"):
            record = dispatcher.dispatch(event, evaluate=True)
    """

    def __init__(
        self,
        context: RunContext,
        evaluator: Optional[AnomalyEvaluator] = None,
        aggregator: Optional[NetworkAggregator] = None,
    ):
        self.context = context
        self.evaluator = evaluator or AnomalyEvaluator()
        self.aggregator = aggregator or NetworkAggregator(context)
        self.stats = DispatchStats()

    def dispatch(self, event: AnyEvent, evaluate: bool = False) -> Optional[AnomalyRecord]:
        """
        Apply one event.

        Returns:
            An AnomalyRecord if `evaluate` is set and the event is an
            anomalous purchase, else None.

        Raises:
            ConfigurationError: a graph or purchase event arrived before the
                run parameters were set.
        """
        if isinstance(event, ParameterInit):
            self._apply_parameters(event)
            return None

        if isinstance(event, (BefriendEvent, UnfriendEvent, PurchaseEvent)):
            self.context.parameters.require()

        if isinstance(event, BefriendEvent):
            self._befriend(event)
        elif isinstance(event, UnfriendEvent):
            self._unfriend(event)
        elif isinstance(event, PurchaseEvent):
            return self._purchase(event, evaluate)
        else:
            self.stats.unsupported_events += 1
            logger.warning(f"Skipping unsupported event: {type(event).__name__}")

        return None

    def dispatch_all(self, events: Iterable[AnyEvent], evaluate: bool = False) -> Iterator[AnomalyRecord]:
        """Dispatch a sequence in order, yielding anomaly records as they occur."""
        for event in events:
            record = self.dispatch(event, evaluate=evaluate)
            if record is not None:
                yield record

    def _apply_parameters(self, event: ParameterInit) -> None:
        self.stats.parameter_records += 1
        applied = self.context.parameters.initialize(event.degrees_of_separation, event.threshold)
        if not applied:
            self.stats.ignored_parameter_records += 1
            parameters = self.context.parameters
            logger.warning(
                f"Ignoring repeated parameter record D={event.degrees_of_separation}, "
                f"T={event.threshold}; keeping D={parameters.degrees_of_separation}, "
                f"T={parameters.threshold}"
            )

    def _befriend(self, event: BefriendEvent) -> None:
        self.stats.befriend_events += 1
        directory = self.context.directory
        user1 = directory.get_or_create(event.id1)
        user2 = directory.get_or_create(event.id2)
        user1.befriend(event.timestamp, user2.id)
        user2.befriend(event.timestamp, user1.id)

    def _unfriend(self, event: UnfriendEvent) -> None:
        self.stats.unfriend_events += 1
        directory = self.context.directory
        user1 = directory.get_or_create(event.id1)
        user2 = directory.get_or_create(event.id2)
        user1.unfriend(event.timestamp, user2.id)
        user2.unfriend(event.timestamp, user1.id)

    def _purchase(self, event: PurchaseEvent, evaluate: bool) -> Optional[AnomalyRecord]:
        self.stats.purchase_events += 1
        user = self.context.directory.get_or_create(event.id)
        amount = event.amount_pennies

        record = None
        if evaluate:
            self.stats.evaluated_purchases += 1
            network_window = self.aggregator.aggregate_purchases(user)
            anomaly = self.evaluator.evaluate(network_window, amount)
            if anomaly is not None:
                record = AnomalyRecord(event=event, mean=anomaly.mean, sd=anomaly.sd)
                self.stats.anomalies += 1
                logger.info(
                    f"🚨 Anomaly: user={event.id} amount={event.amount} "
                    f"mean={record.mean_amount} sd={record.sd_amount} at {event.timestamp}"
                )

        # Record AFTER evaluating (a purchase is never part of its own baseline)
        if not user.add_purchase(event.timestamp, amount):
            self.stats.discarded_purchases += 1
            logger.debug(f"Purchase by {event.id} at {event.timestamp} older than a full window; discarded")

        return record
