"""
Network Purchase Anomaly Engine
===============================

Flags a purchase when its amount exceeds the mean of the most recent
purchases made inside the buyer's social network by more than three
standard deviations.

- core: friend graph, bounded purchase windows, network aggregation, 3-sigma test
- ingestion: JSON-lines event schema and readers
- pipeline: event dispatch, batch/stream runs, flagged-purchase output
"""

__version__ = "1.0.0"
__status__ = "Production"
