"""
Test suite for anomaly_engine.ingestion.
"""
