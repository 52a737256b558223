"""
System clipboard access.

Primary strategy pipes the text into the platform clipboard command
(pbcopy, clip, wl-copy, xclip, xsel). When no such command exists, the
fallback borrows a hidden Tk window's clipboard and destroys the window
afterwards. That works on Windows and macOS only: an X11 selection dies
with the window that owns it, so on X11 the fallback refuses to copy.
"""
import asyncio
import os
import shlex
import shutil
from typing import Optional, Sequence

from config import Config
from .console import debug, error
from .errors import ClipboardError


class CommandClipboard:
    """Write to the clipboard through a platform command's stdin."""

    CANDIDATES = (
        ("pbcopy",),                                # macOS
        ("clip",),                                  # Windows
        ("wl-copy",),                               # Wayland
        ("xclip", "-selection", "clipboard"),       # X11
        ("xsel", "--clipboard", "--input"),         # X11
    )

    def __init__(self, command: Optional[Sequence[str]] = None):
        self.command = list(command) if command else self.detect()

    @classmethod
    def detect(cls) -> Optional[list[str]]:
        """First candidate command found on PATH, or None."""
        for argv in cls.CANDIDATES:
            if shutil.which(argv[0]):
                return list(argv)
        return None

    def available(self) -> bool:
        return bool(self.command)

    @property
    def program(self) -> str:
        """Bare command name: "clip" for C:\\Windows\\System32\\clip.exe."""
        name = self.command[0].replace("\\", "/").rsplit("/", 1)[-1].lower()
        return name[:-4] if name.endswith(".exe") else name

    def encode(self, text: str) -> bytes:
        # clip.exe reads its stdin in the console code page unless it sees a UTF-16 BOM
        if self.program == "clip":
            return b"\xff\xfe" + text.encode("utf-16-le")
        return text.encode("utf-8")

    def env(self) -> Optional[dict]:
        # pbcopy decodes stdin using the locale, which is often unset for child processes
        if self.program == "pbcopy":
            return {**os.environ, "LANG": "en_US.UTF-8"}
        return None

    async def write(self, text: str) -> None:
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                env=self.env(),
            )
            await proc.communicate(self.encode(text))
        except OSError as e:
            raise ClipboardError(f"{self.command[0]} could not be started") from e

        if proc.returncode != 0:
            raise ClipboardError(f"{self.command[0]} exited with code {proc.returncode}")


class TkClipboard:
    """
    Fallback: a withdrawn Tk root window used only for its clipboard.

    Refuses on X11, where the copied text disappears as soon as the window
    is destroyed. Install xclip, xsel or wl-copy there instead.
    """

    def available(self) -> bool:
        return True

    def write(self, text: str) -> None:
        try:
            import tkinter
        except ImportError as e:
            raise ClipboardError("tkinter is not available") from e

        try:
            root = tkinter.Tk()
        except tkinter.TclError as e:
            raise ClipboardError("no display for Tk clipboard") from e

        try:
            if root.tk.call("tk", "windowingsystem") == "x11":
                raise ClipboardError(
                    "Tk clipboard does not outlive its window on X11; "
                    "install xclip, xsel or wl-copy"
                )
            root.withdraw()
            root.clipboard_clear()
            root.clipboard_append(text)
            root.update()
        except tkinter.TclError as e:
            raise ClipboardError("Tk clipboard write failed") from e
        finally:
            root.destroy()


class Clipboard:
    """Try the primary strategy if it is available, else the fallback."""

    def __init__(self, primary=None, fallback=None):
        self.primary = primary if primary is not None else CommandClipboard()
        self.fallback = fallback if fallback is not None else TkClipboard()

    @classmethod
    def from_config(cls) -> "Clipboard":
        command = shlex.split(Config.CLIPBOARD_COMMAND) if Config.CLIPBOARD_COMMAND else None
        return cls(primary=CommandClipboard(command))

    async def copy(self, text: str) -> bool:
        """
        Copy text to the system clipboard.

        Returns:
            True on success. Failures are logged, never raised.
        """
        if self.primary.available():
            try:
                await self.primary.write(text)
            except ClipboardError as e:
                error("Failed to copy", e)
                return False
            debug(f"Copied {len(text)} chars via {type(self.primary).__name__}")
            return True

        try:
            self.fallback.write(text)
        except ClipboardError as e:
            error("Fallback copy failed", e)
            return False
        debug(f"Copied {len(text)} chars via fallback")
        return True
