"""Application entry point.

Serves the chat API and the NiceGUI chat page. Environment variables are
loaded from a .env file.

Modes (RUN_MODE):
    - integrated: NiceGUI mounted on the FastAPI app, one port (default)
    - separate: API and page as two processes on PORT and UI_PORT
"""

import logging
import os
import subprocess
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
UI_PORT = int(os.getenv("UI_PORT", "8080"))


def run_integrated() -> None:
    """Serve API and chat page from one uvicorn server."""
    import uvicorn
    from nicegui import ui

    from curriculum_assistant.api.app import create_app
    from curriculum_assistant.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(
        app,
        title="Curriculum Assistant",
        favicon="🎓",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "curriculum-assistant-secret"),
    )

    logger.info(f"Chat page on http://localhost:{PORT}/, API docs on http://localhost:{PORT}/docs")
    uvicorn.run(app, host=HOST, port=PORT, log_level=os.getenv("LOG_LEVEL", "info").lower())


def run_separate() -> None:
    """Run the API and the chat page as two child processes.

    The page reaches the API through API_BASE_URL. Stops both when the API
    exits or on Ctrl+C.
    """
    env = {**os.environ, "API_BASE_URL": os.getenv("API_BASE_URL", f"http://localhost:{PORT}")}
    commands = [
        [
            sys.executable, "-m", "uvicorn", "curriculum_assistant.api.app:app",
            "--host", HOST, "--port", str(PORT),
        ],
        [sys.executable, "-c", "from curriculum_assistant.ui.chat_page import main; main()"],
    ]

    logger.info(f"API on http://localhost:{PORT}, chat page on http://localhost:{UI_PORT}")
    processes = [subprocess.Popen(command, env=env) for command in commands]
    try:
        processes[0].wait()
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for process in processes:
            process.terminate()
        for process in processes:
            process.wait()


def main() -> None:
    """Start the application in the mode selected by RUN_MODE."""
    mode = os.getenv("RUN_MODE", "integrated").lower()
    logger.info(f"Starting Curriculum Assistant in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
