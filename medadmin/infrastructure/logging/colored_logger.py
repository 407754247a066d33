"""Colored mutation logger — ANSI-colored console logging for coordinated writes.

Provides a MutationLogger with color-coded output per mutation step,
so a create/update/delete can be traced from asset upload to cache update.

Color scheme:
    🟢 Green   — Asset upload
    🔵 Blue    — Document write
    🟣 Magenta — Document delete
    🟠 Cyan    — Local cache update
    🟡 Yellow  — Full reload
    🔴 Red     — Failed steps
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"


# ── Mutation Step Definitions ────────────────────────────────────────

class MutationStage:
    """Predefined mutation steps with colors and icons."""

    UPLOAD = ("UPLOAD", _Colors.GREEN, "📁")
    WRITE = ("WRITE", _Colors.BLUE, "📝")
    DELETE = ("DELETE", _Colors.MAGENTA, "🗑️")
    CACHE = ("CACHE", _Colors.CYAN, "📋")
    REFRESH = ("REFRESH", _Colors.YELLOW, "🔄")


# ── MutationLogger ───────────────────────────────────────────────────

class MutationLogger:
    """Color-coded logger for the steps of one coordinated mutation.

    Usage:
        log = MutationLogger("MutationCoordinator")
        with log.timed_step(MutationStage.UPLOAD, "Uploading medicines/abc"):
            handle = await blob_store.upload(...)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    @staticmethod
    def _details(kwargs: dict[str, Any]) -> str:
        if not kwargs:
            return ""
        details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
        return f" {_Colors.GRAY}({details}){_Colors.RESET}"

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        self._logger.info(
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}{self._details(kwargs)}"
        )

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        self._logger.info(
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}{self._details(kwargs)}"
        )

    def step_error(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        label, _, _ = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        self._logger.info(f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}{self._details(kwargs)}")

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Context manager that logs start/end of a step with elapsed time."""
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.2f}s")
