"""Integration tests for components working together as a system.

Coverage:
    - Chat endpoint with real HTTP requests over ASGITransport
    - SSE framing, pre-stream and mid-stream failures, timeouts
    - Full chat workflow from upload to streamed reply

Only the model service is scripted; routing, validation and streaming run
for real.
"""
