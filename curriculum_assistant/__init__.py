"""Curriculum Assistant - chat with an uploaded curriculum document.

Combines FastAPI for HTTP streaming, Agno for model orchestration,
NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - api: Chat endpoint streaming the model's reply
    - agent: Gemini orchestration with a fixed system instruction
    - attachments: Inline data URL encoding of uploaded files
    - ui: Chat page, conversation state and markdown rendering
    - models: Message, request and stream schemas
"""

__version__ = "0.1.0"
