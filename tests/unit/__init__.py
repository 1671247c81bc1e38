"""Unit tests for individual components in isolation.

Ensures fast execution with minimal dependencies.

Coverage:
    - models/: Pydantic validation and serialization
    - attachments/: Data URL encoding and size limits
    - agent/: Configuration, message conversion and event filtering
    - ui/: Markdown rendering and chat session state

Uses mocks for external services. Leverages pytest-check for multiple
assertions per test.
"""
