"""Test package for the Curriculum Assistant.

Provides unit tests for isolated logic and integration tests for workflows.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end workflow tests

The model service is always replaced by a scripted fake; no test needs
credentials or network access. Leverages pytest with pytest-check for soft
assertions.
"""
