from __future__ import annotations

"""
Simple TCP REPL server for Gosp.

Protocol: JSON per line over TCP.
- Request: {"cmd": "eval", "code": "(+ 1 2)", "session": "alice"}
  Response: {"ok": true, "result": <transcript>}
         or {"ok": false, "error": <transcript or message>, "loc": {"source", "line", "column"} | null}
- Request: {"cmd": "history", "session": "alice", "limit": 10}
  Response: {"ok": true, "items": [{"timestamp", "expr", "result"}, ...]}
- Request: {"cmd": "drop", "session": "alice"}
  Response: {"ok": true, "dropped": true}

Requests with a session key share that session's state (definitions persist);
requests without one run against a fresh builtins-only state.
"""

import json
import logging
import socket
import threading
from typing import Any, Dict, Optional, Tuple

from gosp.config import get_log_level, get_repl_host, get_repl_port
from gosp.sessions import SessionRegistry

logger = logging.getLogger(__name__)

MAX_LINE_BYTES = 1 << 20


def _error(message: str, loc: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"ok": False, "error": message, "loc": loc}


class ReplServer:
    def __init__(self, host: Optional[str] = None, port: Optional[int] = None,
                 sessions: Optional[SessionRegistry] = None):
        self.host = host if host is not None else get_repl_host()
        self.port = port if port is not None else get_repl_port()
        self.sessions = sessions if sessions is not None else SessionRegistry()

    def handle_request(self, req: Any) -> Dict[str, Any]:
        """Answer one decoded request."""
        if not isinstance(req, dict):
            return _error("request must be a JSON object")
        cmd = req.get("cmd")
        session = req.get("session") or None
        if session is not None and not isinstance(session, str):
            return _error("session must be a string")

        if cmd == "eval":
            code = req.get("code", "")
            if not isinstance(code, str) or not code.strip():
                return _error("code is required")
            result = self.sessions.evaluate(session, code.strip(), source_name="request")
            if not result.ok:
                return _error(result.transcript, result.error_location.to_json())
            return {"ok": True, "result": result.transcript}

        if cmd == "history":
            if session is None:
                return _error("session is required")
            limit = req.get("limit")
            if limit is not None and (not isinstance(limit, int) or limit < 0):
                return _error("limit must be a non-negative integer")
            items = self.sessions.history(session, limit)
            return {"ok": True, "items": [item.to_json() for item in items]}

        if cmd == "drop":
            if session is None:
                return _error("session is required")
            return {"ok": True, "dropped": self.sessions.drop(session)}

        return _error(f"Unknown cmd: {cmd}")

    def handle_line(self, line: bytes) -> Dict[str, Any]:
        try:
            req = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as ex:
            return _error(f"Invalid request: {ex}")
        return self.handle_request(req)

    def serve_forever(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((self.host, self.port))
            s.listen(5)
            logger.info("Listening on %s:%d", self.host, self.port)
            while True:
                conn, addr = s.accept()
                threading.Thread(target=self._handle_client, args=(conn, addr), daemon=True).start()

    def _handle_client(self, conn: socket.socket, addr: Tuple[str, int]):
        logger.debug("client connected: %s:%d", *addr)
        with conn:
            buf = b""
            while True:
                data = conn.recv(4096)
                if not data:
                    break
                buf += data
                if len(buf) > MAX_LINE_BYTES and b"\n" not in buf:
                    conn.sendall((json.dumps(_error("request too large")) + "\n").encode("utf-8"))
                    break
                while b"\n" in buf:
                    line, buf = buf.split(b"\n", 1)
                    line = line.strip()
                    if not line:
                        continue
                    resp = self.handle_line(line)
                    conn.sendall((json.dumps(resp) + "\n").encode("utf-8"))
        logger.debug("client disconnected: %s:%d", *addr)


if __name__ == "__main__":
    logging.basicConfig(level=get_log_level(), format="%(levelname)s %(name)s: %(message)s")
    ReplServer().serve_forever()
