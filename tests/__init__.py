"""
Test suite for the export console core.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_payload_reconciler.py -v
"""
