"""
Test suite for the CLI and diagnostics.
"""
