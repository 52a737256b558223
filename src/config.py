"""
Centralized configuration. Load once, use everywhere.
"""
import os
from dotenv import load_dotenv
from google import genai

load_dotenv()


class Config:
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    MODEL_NAME = os.getenv("GEMINI_MODEL", "gemini-3-flash-preview")

    # ─────────────────────────────────────────────────────────────
    # Operation tracking
    # ─────────────────────────────────────────────────────────────
    # When true, any in-flight extraction/generation blocks every other one.
    # Off by default: extraction and generation may overlap.
    EXCLUSIVE_OPERATIONS = os.getenv("EXCLUSIVE_OPERATIONS", "false").lower() == "true"

    # ─────────────────────────────────────────────────────────────
    # Clipboard export
    # ─────────────────────────────────────────────────────────────
    # Seconds before the "copied" marker is cleared
    COPIED_MARKER_SECONDS = float(os.getenv("COPIED_MARKER_SECONDS", "2.0"))

    # Optional explicit clipboard command, e.g. "xclip -selection clipboard"
    CLIPBOARD_COMMAND = os.getenv("CLIPBOARD_COMMAND", "")

    # Debug mode - set DEBUG=1 in env to enable verbose logging
    DEBUG = os.getenv("DEBUG", "").lower() in ("1", "true", "yes")

    @classmethod
    def get_api_key(cls) -> str:
        """
        Get the Gemini API key.

        Raises:
            ValueError: if GEMINI_API_KEY is not set
        """
        if cls.GEMINI_API_KEY:
            return cls.GEMINI_API_KEY
        raise ValueError(
            "No Gemini API key found. Set GEMINI_API_KEY in your .env file."
        )


def get_genai_client() -> genai.Client:
    """Get configured Gemini client."""
    return genai.Client(api_key=Config.get_api_key())
