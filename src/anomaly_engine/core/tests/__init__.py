"""
Test suite for anomaly_engine.core.
"""
