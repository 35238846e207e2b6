"""
pz_core.events
--------------
Diagnostic channel for the protection-zone assistant.

The assistant never raises on bad input; instead it reports each skipped
record, rejected candidate or failed decode to an Observer. LoggingObserver
is the default sink, CollectingObserver keeps events for callers that need
to tell "nothing to do" apart from "something failed".
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import logging
from .logger import get_logger


class Diagnostic(str, Enum):
    IMPORT_FAILED = "import_failed"
    KEY_NOT_FOUND = "key_not_found"
    UNWRAP_FAILED = "unwrap_failed"
    NO_PAYLOAD = "no_payload"
    DECRYPT_REJECTED = "decrypt_rejected"
    CANDIDATES_EXHAUSTED = "candidates_exhausted"
    DECODE_FAILED = "decode_failed"
    VALIDATION_FAILED = "validation_failed"


LEVELS = {
    Diagnostic.NO_PAYLOAD: logging.INFO,
    Diagnostic.DECRYPT_REJECTED: logging.DEBUG,
}


@dataclass(frozen=True)
class DiagnosticEvent:
    kind: Diagnostic
    message: str
    index: Optional[int] = None
    detail: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        where = "" if self.index is None else f"[{self.index}]"
        return f"{self.kind.value}{where}: {self.message}"


class Observer:
    def notify(self, event: DiagnosticEvent) -> None:
        raise NotImplementedError


class LoggingObserver(Observer):
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger("pz_core.diagnostics")

    def notify(self, event: DiagnosticEvent) -> None:
        self.logger.log(LEVELS.get(event.kind, logging.WARNING), "%s", event)


class CollectingObserver(Observer):
    """Keeps every event in order. Not synchronized; use one per call chain."""

    def __init__(self):
        self.events: List[DiagnosticEvent] = []

    def notify(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def kinds(self) -> List[Diagnostic]:
        return [event.kind for event in self.events]
