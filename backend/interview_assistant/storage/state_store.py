from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Protocol

from core.state import RESUMABLE_STATUSES
from interview_assistant.interview.models import AppState, Candidate
from .codec import decode_snapshot, encode_snapshot


logger = logging.getLogger("interview.storage")


class StateStore(Protocol):
    def load(self) -> AppState:
        ...

    def save(self, state: AppState) -> None:
        ...


class InMemoryStateStore:
    """Keeps the encoded snapshot in memory, so reloads still go through the codec."""

    def __init__(self):
        self._lock = Lock()
        self._snapshot: str | None = None
        self.save_count = 0

    def load(self) -> AppState:
        with self._lock:
            raw = self._snapshot
        if raw is None:
            return AppState()
        try:
            return decode_snapshot(json.loads(raw))
        except ValueError as exc:
            logger.warning("Discarding unreadable in-memory snapshot: %s", exc)
            return AppState()

    def save(self, state: AppState) -> None:
        payload = json.dumps(encode_snapshot(state), ensure_ascii=False)
        with self._lock:
            self._snapshot = payload
            self.save_count += 1


class JsonFileStateStore:
    """
    Single versioned JSON file. Writes go to a temp file that replaces the
    snapshot, so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, path: Path | str):
        self._path = Path(path)
        self._lock = Lock()

    def load(self) -> AppState:
        with self._lock:
            if not self._path.exists():
                return AppState()
            try:
                payload = json.loads(self._path.read_text(encoding="utf-8"))
                return decode_snapshot(payload)
            except Exception as exc:
                logger.warning("Discarding unreadable state snapshot %s: %s", self._path, exc)
                return AppState()

    def save(self, state: AppState) -> None:
        encoded = json.dumps(encode_snapshot(state), ensure_ascii=False)
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self._path.with_suffix(".tmp")
            temp_path.write_text(encoded, encoding="utf-8")
            temp_path.replace(self._path)


def find_resumable_sessions(state: AppState) -> list[Candidate]:
    return [
        candidate
        for candidate in state.candidates
        if candidate.current_session is not None
        and candidate.current_session.status in RESUMABLE_STATUSES
    ]
