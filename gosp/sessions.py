"""Per-session interpreter states for hosts serving many clients.

Each session owns one InterpreterState and a lock; evaluations against the
same session are serialised so no evaluation sees another one's half-applied
bindings or definitions. The session table has its own lock. Requests
without a session key run against a throw-away builtins-only state.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Optional

from gosp.config import get_history_limit
from gosp.interpreter import EvalResult, evaluate_source, new_state
from gosp.types.environment import InterpreterState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    timestamp: float
    text: str
    result: str

    def to_json(self) -> dict:
        return {"timestamp": self.timestamp, "expr": self.text, "result": self.result}


@dataclass
class Session:
    key: str
    state: InterpreterState = field(default_factory=new_state)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    history: deque = field(default_factory=deque, repr=False)


class SessionRegistry:
    def __init__(self, history_limit: Optional[int] = None):
        self.history_limit = history_limit if history_limit is not None else get_history_limit()
        self._lock = threading.Lock()
        self._sessions: dict[str, Session] = {}

    def get(self, key: str) -> Session:
        """The session for `key`, created on first use."""
        with self._lock:
            session = self._sessions.get(key)
            if session is None:
                session = Session(key, history=deque(maxlen=self.history_limit or None))
                self._sessions[key] = session
                logger.debug("created session %s", key)
            return session

    def find(self, key: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(key)

    def drop(self, key: str) -> bool:
        with self._lock:
            dropped = self._sessions.pop(key, None) is not None
        if dropped:
            logger.debug("dropped session %s", key)
        return dropped

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def evaluate(self, key: Optional[str], text: str, source_name: str = "request") -> EvalResult:
        """Evaluate against the session's state, or a fresh state when `key` is None.

        Successful session evaluations are appended to the session history.
        """
        if key is None:
            return evaluate_source(new_state(), source_name, text)

        session = self.get(key)
        with session.lock:
            result = evaluate_source(session.state, source_name, text)
            if result.ok:
                session.history.append(HistoryEntry(time.time(), text, result.transcript))
        if not result.ok:
            logger.info("session %s: evaluation failed at %s", key, result.error_location)
        return result

    def history(self, key: str, limit: Optional[int] = None) -> list[HistoryEntry]:
        """Most recent entries first."""
        session = self.find(key)
        if session is None:
            return []
        with session.lock:
            entries = list(reversed(session.history))
        return entries[:limit] if limit is not None else entries
