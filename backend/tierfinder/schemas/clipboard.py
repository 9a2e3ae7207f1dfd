"""Clipboard schemas."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ClipboardMode(str, Enum):
    COPY = "copy"
    CUT = "cut"


class ClipboardOrigin(str, Enum):
    VIRTUAL = "virtual"
    NATIVE = "native"


class ClipboardState(BaseModel):
    """The one active virtual clipboard context."""
    model_config = ConfigDict(frozen=True)

    source_id: str
    paths: tuple[str, ...]
    mode: ClipboardMode = ClipboardMode.COPY
    origin: ClipboardOrigin = ClipboardOrigin.VIRTUAL


class ClipboardStatus(BaseModel):
    """Clipboard flags exposed to the presentation layer."""
    state: ClipboardState | None = None
    has_pasteable: bool = False
    native_count: int = 0


class ClipboardRequest(BaseModel):
    paths: list[str] | None = None  # defaults to current selection


class PasteRequest(BaseModel):
    target_path: str | None = None  # defaults to current path
