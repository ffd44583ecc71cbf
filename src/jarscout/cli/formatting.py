"""Shared formatting helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text


if TYPE_CHECKING:
    from jarscout.core.models import SlotState


def format_state(state: SlotState) -> Text:
    """Slot state as Rich text in its state colour."""
    return Text(str(state), style=state.color)


def format_size(size_bytes: int) -> str:
    """Format size in bytes to human-readable format."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} TB"
