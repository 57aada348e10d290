"""Explicit client session and its local token file.

The Session object is handed to whatever issues REST calls; nothing looks the
token up implicitly.  The token is persisted to a local JSON file that is
gitignored, so a restart does not force a new login.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path

_SESSION_PATH = Path('.gotourney_session.json')


@dataclass
class Session:
    token: str = ''
    email: str = ''

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def login(self, token: str, email: str = '') -> None:
        if not token:
            raise ValueError('login() needs a non-empty token')
        self.token = token
        self.email = email

    def logout(self) -> None:
        self.token = ''
        self.email = ''


def load_session(path: Path | None = None) -> Session:
    session_path = path or _SESSION_PATH
    if not session_path.exists():
        return Session()
    try:
        raw = json.loads(session_path.read_text(encoding='utf-8'))
    except json.JSONDecodeError:
        return Session()
    if not isinstance(raw, dict):
        return Session()
    return Session(token=str(raw.get('token', '')), email=str(raw.get('email', '')))


def save_session(session: Session, path: Path | None = None) -> None:
    session_path = path or _SESSION_PATH
    session_path.write_text(json.dumps(asdict(session), indent=2), encoding='utf-8')
