"""
Test suite for the calculator execution core

Contains:
- tests/unit/          : Unit tests for individual modules and end-to-end batches
"""
