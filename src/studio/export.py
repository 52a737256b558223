"""
Copy scripts to the clipboard as plain labeled text.

One script:
    Hook: ...
    Problem: ...
    Solution: ...
    CTA: ...

All scripts: each block prefixed with "Variation N:", blocks separated by a
line holding only "---".
"""
import asyncio
import re
from typing import Iterable, Optional

from config import Config
from tools.clipboard import Clipboard
from tools.schemas import ScriptVariation
from .session import StudioSession, get_session


COPY_ALL_ID = -1
SEPARATOR = "\n\n---\n\n"

LABELS = (("Hook", "hook"), ("Problem", "problem"), ("Solution", "solution"), ("CTA", "cta"))

_HEADER_RE = re.compile(r"^Variation \d+:$")


def format_variation(variation: ScriptVariation) -> str:
    return "\n".join(f"{label}: {getattr(variation, attr)}" for label, attr in LABELS)


def format_variations(variations: Iterable[ScriptVariation]) -> str:
    return SEPARATOR.join(
        f"Variation {i}:\n{format_variation(v)}"
        for i, v in enumerate(variations, 1)
    )


def _label_start(lines: list[str], label: str, start: int, last: bool = False) -> Optional[int]:
    """Index of the first (or last) line at or after start that opens `label`."""
    hits = [i for i in range(start, len(lines)) if lines[i].startswith(f"{label}: ")]
    if not hits:
        return None
    return hits[-1] if last else hits[0]


def _parse_block(block: str) -> Optional[dict]:
    lines = block.split("\n")
    if lines and _HEADER_RE.match(lines[0]):
        lines = lines[1:]

    starts = []
    position = 0
    for label, _ in LABELS:
        index = _label_start(lines, label, position, last=(label == "CTA"))
        if index is None or (not starts and index != 0):
            return None
        starts.append(index)
        position = index + 1

    fields = {}
    for (label, attr), start, end in zip(LABELS, starts, starts[1:] + [len(lines)]):
        first = lines[start][len(label) + 2:]
        fields[attr] = "\n".join([first] + lines[start + 1:end])
    return fields


def parse_variations_text(text: str) -> list[dict]:
    """
    Read text produced by format_variation/format_variations back into
    {hook, problem, solution, cta} dicts, in order.

    Labels are matched strictly in Hook → Problem → Solution → CTA order and
    the last "CTA: " line of a block wins, so a Solution may itself contain
    a "CTA: " line. Values keep their whitespace. Still ambiguous: a Hook
    holding a "Problem: " line, a Problem holding a "Solution: " line, a
    CTA holding a "CTA: " line, or any value containing the separator.
    Blocks missing a label are skipped.
    """
    results = []
    for block in text.split(SEPARATOR):
        fields = _parse_block(block)
        if fields is not None:
            results.append(fields)
    return results


# ─────────────────────────────────────────────────────────────
# Copy actions
# ─────────────────────────────────────────────────────────────

def _mark_copied(session: StudioSession, copied_id: int) -> None:
    """Set the copied marker and clear it after COPIED_MARKER_SECONDS."""
    session.copied_id = copied_id

    def clear():
        # A later copy owns the marker now
        if session.copied_id == copied_id:
            session.copied_id = None

    asyncio.get_running_loop().call_later(Config.COPIED_MARKER_SECONDS, clear)


async def copy_text(
    text: str,
    copied_id: int,
    *,
    session: Optional[StudioSession] = None,
    clipboard: Optional[Clipboard] = None,
) -> bool:
    """Copy text; on success mark copied_id as the last copied item."""
    session = session or get_session()
    clipboard = clipboard or Clipboard.from_config()

    copied = await clipboard.copy(text)
    if copied:
        _mark_copied(session, copied_id)
    return copied


async def copy_one(
    index: int,
    *,
    session: Optional[StudioSession] = None,
    clipboard: Optional[Clipboard] = None,
) -> bool:
    """
    Copy one variation by its position in the current result set.

    Raises:
        IndexError: no variation at that position
    """
    session = session or get_session()
    if index < 0:
        raise IndexError(f"variation index must be >= 0, got {index}")
    variation = session.variations[index]
    return await copy_text(format_variation(variation), index, session=session, clipboard=clipboard)


async def copy_all(
    *,
    session: Optional[StudioSession] = None,
    clipboard: Optional[Clipboard] = None,
) -> bool:
    """Copy every variation as one block. Nothing to copy returns False."""
    session = session or get_session()
    if not session.variations:
        return False
    return await copy_text(
        format_variations(session.variations),
        COPY_ALL_ID,
        session=session,
        clipboard=clipboard,
    )
