"""NiceGUI interface - thin visualization layer for the curriculum chat.

Responsibilities:
    - Conversation state and the submit flow (conversation)
    - Markdown rendering of assistant replies (markdown)
    - Chat page with PDF selection and streaming display (chat_page)

All model access goes through the chat API; the page holds no state beyond
the current session.
"""
