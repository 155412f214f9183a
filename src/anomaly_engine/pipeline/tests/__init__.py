"""
Test suite for anomaly_engine.pipeline.
"""
