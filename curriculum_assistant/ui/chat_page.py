"""NiceGUI chat page: upload a curriculum PDF and ask questions about it."""

import os

from nicegui import events, ui

from curriculum_assistant.models.schemas import PDF_MEDIA_TYPE, FilePart, Role, UIMessage
from curriculum_assistant.ui.conversation import ChatSession, SelectedFile, visible_parts
from curriculum_assistant.ui.markdown import render_markdown, render_plain

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: linear-gradient(135deg, #ecfdf5 0%, #f0fdfa 50%, #cffafe 100%); min-height: 100vh; }

    .app-card {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 16px;
        box-shadow: 0 10px 30px rgba(0, 0, 0, 0.08);
    }

    .brand-gradient { background: linear-gradient(90deg, #10b981 0%, #0d9488 100%); }

    .message-user {
        background: linear-gradient(90deg, #10b981 0%, #0d9488 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: white;
        color: #1f2937;
        border: 1px solid #e5e7eb;
        border-radius: 18px 18px 18px 4px;
    }

    .avatar-user { background: rgba(16, 185, 129, 0.85); }
    .avatar-assistant { background: linear-gradient(90deg, #14b8a6 0%, #06b6d4 100%); }

    .typing-dot {
        width: 10px; height: 10px;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(1) { background: #10b981; }
    .typing-dot:nth-child(2) { background: #14b8a6; animation-delay: 0.1s; }
    .typing-dot:nth-child(3) { background: #06b6d4; animation-delay: 0.2s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .upload-zone {
        background: linear-gradient(90deg, #ecfdf5 0%, #f0fdfa 100%);
        border: 2px dashed #6ee7b7;
        border-radius: 16px;
    }
    .upload-zone:hover { border-color: #34d399; }

    .send-btn { background: linear-gradient(90deg, #10b981 0%, #0d9488 100%) !important; }
</style>
"""

HINT_CARDS = [
    ("Content Questions", "Ask about any topic in the curriculum", "emerald"),
    ("Concept Explanations", "Get simplified explanations of concepts", "teal"),
    ("Practice Questions", "Request practice exam questions", "cyan"),
]


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()

    messages_container: ui.column
    response_html: ui.html | None = None
    rendered_count = 0
    upload: ui.upload

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "smart_toy"
        with ui.element("div").classes(
            f"w-10 h-10 rounded-full flex items-center justify-center shrink-0 {css}"
        ):
            ui.icon(icon).classes("text-white text-xl")

    def render_file_chip(part: FilePart, is_user: bool) -> None:
        chip = "bg-white/20 text-white" if is_user else "bg-red-50 border border-red-200"
        with ui.row().classes(f"items-center gap-3 p-3 mt-3 rounded-xl {chip}"):
            ui.icon("description").classes("text-red-500 text-2xl")
            ui.label(part.filename).classes("text-base font-medium truncate")

    def render_message(msg: UIMessage) -> ui.html | None:
        """Render one message; returns the element holding its last text part."""
        is_user = msg.role == Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        last_text: ui.html | None = None

        with ui.row().classes(f"w-full {align} gap-3 items-start"):
            if not is_user:
                render_avatar(False)
            with ui.element("div").classes(f"max-w-[85%] px-5 py-4 {bubble}"):
                for part in visible_parts(msg):
                    if isinstance(part, FilePart):
                        render_file_chip(part, is_user)
                    elif is_user:
                        # User text is shown verbatim
                        ui.html(render_plain(part.text), sanitize=False).classes(
                            "whitespace-pre-wrap leading-relaxed text-base"
                        )
                    else:
                        last_text = ui.html(render_markdown(part.text), sanitize=False).classes(
                            "leading-relaxed text-base"
                        )
            if is_user:
                render_avatar(True)
        return last_text

    def render_welcome() -> None:
        with ui.column().classes(
            "w-full items-center gap-6 p-10 border-2 border-dashed border-emerald-300 "
            "rounded-2xl bg-white/60"
        ):
            ui.icon("description").classes("text-7xl text-emerald-600")
            ui.label("Ready to Analyze Your Curriculum").classes(
                "text-2xl font-bold text-gray-800"
            )
            ui.label(
                "Upload your curriculum PDF and start asking questions "
                "to get detailed and helpful answers!"
            ).classes("text-lg text-gray-600 text-center")
            with ui.row().classes("w-full justify-center gap-4"):
                for title, text, color in HINT_CARDS:
                    with ui.column().classes(
                        f"p-5 gap-1 rounded-2xl bg-{color}-50 border-2 border-{color}-200"
                    ):
                        ui.label(title).classes(f"font-bold text-{color}-800")
                        ui.label(text).classes(f"text-{color}-700")

    def render_loading() -> None:
        with ui.row().classes("w-full justify-start gap-3 items-center"):
            render_avatar(False)
            with ui.element("div").classes("message-assistant px-5 py-4"):
                with ui.row().classes("items-center gap-3"):
                    with ui.row().classes("gap-1"):
                        for _ in range(3):
                            ui.element("div").classes("typing-dot")
                    ui.label("Analyzing curriculum...").classes(
                        "text-base text-gray-700 font-medium"
                    )

    def refresh_messages() -> None:
        nonlocal response_html, rendered_count
        messages_container.clear()
        response_html = None
        with messages_container:
            if not session.messages:
                render_welcome()
            for msg in session.messages:
                response_html = render_message(msg)
            waiting = session.messages and session.messages[-1].role == Role.USER
            if session.is_streaming and waiting:
                render_loading()
        rendered_count = len(session.messages)

    def on_update() -> None:
        """Redraw after a state change; stream deltas only touch the last reply."""
        last = session.messages[-1] if session.messages else None
        streaming_into_last = (
            session.is_streaming
            and response_html is not None
            and len(session.messages) == rendered_count
            and last is not None
            and last.role == Role.ASSISTANT
        )
        if streaming_into_last:
            response_html.set_content(render_markdown(last.text))
        else:
            refresh_messages()

    async def handle_upload(e: events.UploadEventArguments) -> None:
        # The upload is held in memory until submit
        content = await e.file.read()
        session.select_files([SelectedFile.from_bytes(e.file.name, e.file.content_type, content)])
        # Free the picker so another PDF replaces this one
        upload.reset()

    async def send_message() -> None:
        if not session.can_submit:
            return
        await session.submit(on_update=on_update)
        if session.error:
            ui.notify(session.error, type="negative")

    # === UI Layout ===
    direction = "rtl" if session.language == "ar" else "ltr"
    with ui.column().classes("w-full max-w-5xl mx-auto p-4 md:p-6 gap-6").props(f"dir={direction}"):
        # Header
        with ui.column().classes("w-full app-card items-center gap-4 py-10"):
            with ui.element("div").classes("brand-gradient rounded-full p-5 shadow-xl"):
                ui.icon("school").classes("text-white text-6xl")
            ui.label("Smart Curriculum Assistant").classes(
                "text-4xl font-bold text-emerald-700 text-center"
            )
            ui.label(
                "Upload your curriculum PDF and ask intelligent questions "
                "about its educational content"
            ).classes("text-lg text-gray-700 text-center max-w-2xl")

        # Messages
        with ui.scroll_area().classes("w-full h-[60vh]"):
            messages_container = ui.column().classes("w-full gap-5 p-2")
            refresh_messages()

        # Input
        with ui.column().classes("w-full app-card p-6 gap-5"):
            with ui.row().classes("w-full upload-zone p-5 items-center justify-between gap-6"):
                upload = (
                    ui.upload(
                        label="Choose Curriculum PDF",
                        on_upload=handle_upload,
                        auto_upload=True,
                        max_files=1,
                    )
                    .props(f"accept={PDF_MEDIA_TYPE} flat bordered")
                    .classes("max-w-xs")
                )
                ui.label().bind_text_from(
                    session,
                    "selected_file",
                    lambda f: f.name if f is not None else "No file selected",
                ).classes("flex-1 text-center text-base font-bold text-emerald-800")
                ui.button(icon="close", on_click=session.clear_selection).props(
                    "flat round dense color=red"
                ).bind_visibility_from(session, "selected_file", backward=lambda f: f is not None)

            ui.label().bind_text_from(session, "error", lambda err: err or "").bind_visibility_from(
                session, "error", backward=bool
            ).classes("text-red-600 text-base")

            with ui.row().classes("w-full gap-4 items-center no-wrap"):
                (
                    ui.input(
                        placeholder=(
                            "Ask about any topic in the curriculum... "
                            "e.g., Explain the math lesson in chapter 3"
                        )
                    )
                    .bind_value(session, "input_text")
                    .bind_enabled_from(session, "is_streaming", backward=lambda busy: not busy)
                    .props("outlined rounded")
                    .classes("flex-grow text-lg")
                    .on("keydown.enter", send_message)
                )
                (
                    ui.button("Send", icon="send", on_click=send_message)
                    .bind_enabled_from(session, "can_submit")
                    .props("unelevated rounded size=lg")
                    .classes("send-btn text-white font-bold")
                )


def main() -> None:
    ui.run(title="Curriculum Assistant", port=int(os.getenv("UI_PORT", "8080")), reload=False)


if __name__ == "__main__":
    main()
