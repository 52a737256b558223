"""
Console logging helpers.

Everything prints with immediate flush; debug output only appears with DEBUG=1.
"""
from config import Config


def log(message: str) -> None:
    """Print with immediate flush."""
    print(message, flush=True)


def debug(message: str) -> None:
    """Print debug message if DEBUG mode enabled."""
    if Config.DEBUG:
        print(f"   [DEBUG] {message}", flush=True)


def warn(message: str) -> None:
    print(f"⚠️  {message}", flush=True)


def error(message: str, exc: Exception = None) -> None:
    """Print an error, with the exception type and text when given."""
    if exc is not None:
        message = f"{message}: {type(exc).__name__}: {exc}"
    print(f"❌ {message}", flush=True)
