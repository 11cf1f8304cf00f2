"""Backend protocol for document decoding and page rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from PIL import Image


@dataclass
class BackendDocument:
    """Represents a decoded PDF document with backend-specific helpers."""

    num_pages: int
    file_size: int
    encrypted: bool = field(default=False, kw_only=True)

    def render_page(self, index: int, scale: float) -> Image.Image:
        """Render the zero-based page ``index`` onto an opaque RGB surface."""
        raise NotImplementedError

    def close(self) -> None:
        """Release native resources held by the document."""


class DocumentBackend(Protocol):
    """Protocol defining how source bytes are decoded and unlocked."""

    def open(self, data: bytes, passphrase: str | None = None) -> BackendDocument:
        """Decode ``data`` and return a backend document wrapper.

        Raises:
            AuthenticationRequiredError: The document is protected and no
                passphrase was supplied.
            AuthenticationRejectedError: The supplied passphrase is wrong.
            DecodeError: The bytes are not an openable PDF.
        """
