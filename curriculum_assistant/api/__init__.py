"""FastAPI endpoints for the curriculum assistant.

Stateless proxy between the chat page and the hosted model. Every request
carries the whole conversation; the reply is streamed back as Server-Sent
Events in the UI message stream format.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Stream the assistant's reply to a conversation
"""

from curriculum_assistant.api.app import app, create_app

__all__ = ["app", "create_app"]
