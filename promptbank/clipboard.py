from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess

from .errors import PromptBankError

logger = logging.getLogger(__name__)


def _clipboard_command() -> list[str] | None:
    """Pick the clipboard command for this platform, or None if none is installed."""
    system = platform.system()

    if system == "Darwin":  # macOS
        candidates = [["pbcopy"]]
    elif system == "Windows":
        candidates = [["clip"]]
    else:
        candidates = [
            ["xclip", "-selection", "clipboard"],
            ["xsel", "--clipboard", "--input"],
        ]
        if os.environ.get("WAYLAND_DISPLAY"):
            candidates.insert(0, ["wl-copy"])

    for cmd in candidates:
        if shutil.which(cmd[0]):
            return cmd
    return None


def copy_to_clipboard(text: str) -> None:
    cmd = _clipboard_command()
    if cmd is None:
        raise PromptBankError.clipboard("no clipboard command available")

    logger.debug(f"Copying {len(text)} chars with {cmd[0]}")
    try:
        subprocess.run(
            cmd,
            input=text,
            text=True,
            capture_output=True,
            check=True,
            timeout=5,
        )
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"{cmd[0]} exited with {e.returncode}"
        raise PromptBankError.clipboard(detail) from e
    except (subprocess.SubprocessError, OSError) as e:
        raise PromptBankError.clipboard(str(e)) from e
