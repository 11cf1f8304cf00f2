"""Opening source documents and tracking their authentication state.

The loader is a small state machine. Every byte buffer starts ``LOCKED``;
a failed attempt without a passphrase stays ``LOCKED`` (authentication
required), a failed attempt with a passphrase moves to ``REJECTED``, and a
successful attempt moves to ``UNLOCKED``, which is terminal for that buffer.
A corrupt stream is reported as a decode failure and never as an
authentication problem.
"""

from __future__ import annotations

import dataclasses
import enum
import hashlib
from typing import Optional

from .backends import BackendDocument, DocumentBackend, PdfiumBackend
from .core.utils import DEFAULT_SOURCE_NAME, base_name, get_logger
from .exceptions import (
    AuthenticationRejectedError,
    AuthenticationRequiredError,
    DecodeError,
)
from .types import AuthState

LOGGER = get_logger("pdfrasterx.source")


class OpenOutcome(str, enum.Enum):
    OPENED = "opened"
    AUTH_REQUIRED = "auth_required"
    AUTH_REJECTED = "auth_rejected"
    DECODE_FAILED = "decode_failed"


_TRANSITIONS: dict[tuple[AuthState, OpenOutcome], AuthState] = {
    (AuthState.LOCKED, OpenOutcome.OPENED): AuthState.UNLOCKED,
    (AuthState.LOCKED, OpenOutcome.AUTH_REQUIRED): AuthState.LOCKED,
    (AuthState.LOCKED, OpenOutcome.AUTH_REJECTED): AuthState.REJECTED,
    (AuthState.REJECTED, OpenOutcome.OPENED): AuthState.UNLOCKED,
    (AuthState.REJECTED, OpenOutcome.AUTH_REQUIRED): AuthState.LOCKED,
    (AuthState.REJECTED, OpenOutcome.AUTH_REJECTED): AuthState.REJECTED,
}


def next_state(state: AuthState, outcome: OpenOutcome) -> AuthState:
    """Return the state reached from ``state`` after an open ``outcome``."""

    if state is AuthState.UNLOCKED:
        return state
    if outcome is OpenOutcome.DECODE_FAILED:
        return state
    return _TRANSITIONS[(state, outcome)]


@dataclasses.dataclass(eq=False)
class SourceDocument:
    """Opaque handle over a decoded source owned by one pipeline session."""

    name: str
    digest: str
    total_pages: int
    auth_state: AuthState
    handle: BackendDocument = dataclasses.field(repr=False)
    passphrase: Optional[str] = dataclasses.field(default=None, repr=False)
    closed: bool = False

    @property
    def base_name(self) -> str:
        return base_name(self.name)

    @property
    def encrypted(self) -> bool:
        return self.handle.encrypted

    def close(self) -> None:
        if not self.closed:
            self.handle.close()
            self.closed = True


@dataclasses.dataclass(frozen=True)
class OpenResult:
    """Outcome of :meth:`SourceLoader.open`."""

    outcome: OpenOutcome
    state: AuthState
    document: Optional[SourceDocument] = None
    reason: Optional[str] = None

    @property
    def opened(self) -> bool:
        return self.outcome is OpenOutcome.OPENED

    @property
    def total_pages(self) -> int:
        return self.document.total_pages if self.document is not None else 0

    @property
    def needs_passphrase(self) -> bool:
        return self.outcome in (OpenOutcome.AUTH_REQUIRED, OpenOutcome.AUTH_REJECTED)

    def unwrap(self) -> SourceDocument:
        """Return the opened document or raise the matching error."""

        if self.outcome is OpenOutcome.AUTH_REJECTED:
            raise AuthenticationRejectedError(self.reason or "")
        if self.outcome is OpenOutcome.AUTH_REQUIRED:
            raise AuthenticationRequiredError(self.reason or "")
        if self.outcome is OpenOutcome.DECODE_FAILED or self.document is None:
            raise DecodeError(self.reason or "")
        return self.document


class SourceLoader:
    """Open raw PDF bytes, optionally with a passphrase."""

    def __init__(self, backend: DocumentBackend | None = None) -> None:
        self.backend: DocumentBackend = backend or PdfiumBackend()
        self._digest: str | None = None
        self._state = AuthState.LOCKED
        self._document: SourceDocument | None = None

    @property
    def state(self) -> AuthState:
        return self._state

    def open(
        self,
        data: bytes,
        passphrase: str | None = None,
        *,
        name: str = DEFAULT_SOURCE_NAME,
    ) -> OpenResult:
        digest = hashlib.sha256(data).hexdigest()
        if digest != self._digest:
            self._digest = digest
            self._state = AuthState.LOCKED
            self._document = None
        elif self._state is AuthState.UNLOCKED and self._document is not None:
            if not passphrase or passphrase == self._document.passphrase:
                return OpenResult(OpenOutcome.OPENED, self._state, self._document)
            # A new passphrase for the same bytes starts over.
            self._state = AuthState.LOCKED
            self._document = None

        try:
            handle = self.backend.open(data, passphrase or None)
        except AuthenticationRejectedError as exc:
            return self._settle(OpenOutcome.AUTH_REJECTED, reason=exc.message)
        except AuthenticationRequiredError as exc:
            return self._settle(OpenOutcome.AUTH_REQUIRED, reason=exc.message)
        except DecodeError as exc:
            LOGGER.error("Failed to decode %s: %s", name, exc.message)
            return self._settle(OpenOutcome.DECODE_FAILED, reason=exc.message)

        result = self._settle(OpenOutcome.OPENED)
        self._document = SourceDocument(
            name=name or DEFAULT_SOURCE_NAME,
            digest=digest,
            total_pages=handle.num_pages,
            auth_state=result.state,
            handle=handle,
            passphrase=passphrase or None,
        )
        LOGGER.info("Opened %s with %s pages", self._document.name, handle.num_pages)
        return dataclasses.replace(result, document=self._document)

    def load(
        self,
        data: bytes,
        passphrase: str | None = None,
        *,
        name: str = DEFAULT_SOURCE_NAME,
    ) -> SourceDocument:
        """Open ``data`` and raise on anything but success."""

        return self.open(data, passphrase, name=name).unwrap()

    def reset(self) -> None:
        """Forget the current byte buffer and its state."""

        self._digest = None
        self._state = AuthState.LOCKED
        self._document = None

    def _settle(self, outcome: OpenOutcome, *, reason: str | None = None) -> OpenResult:
        self._state = next_state(self._state, outcome)
        LOGGER.debug("Open outcome %s, state is now %s", outcome.value, self._state.value)
        return OpenResult(outcome, self._state, reason=reason)


__all__ = [
    "OpenOutcome",
    "OpenResult",
    "SourceDocument",
    "SourceLoader",
    "next_state",
]
