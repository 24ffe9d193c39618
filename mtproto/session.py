"""Session data and its storage on disk."""

from __future__ import annotations

import base64
import binascii
import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from .tl.cursor import LONG_LEN


@dataclass(frozen=True)
class Session:
    """Server hostname, auth key, key hash and salt of one session."""

    key: bytes = b""
    hash: bytes = b""
    salt: int = 0
    hostname: str = ""


class SessionNotFoundError(FileNotFoundError):
    """No stored session exists at the given location."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"file not found: {path}")


class SessionLoader(ABC):
    """Reads and writes sessions from some storage."""

    @abstractmethod
    def load(self) -> Session:
        """Return the stored session; raise SessionNotFoundError if there is none."""

    @abstractmethod
    def store(self, session: Session) -> None:
        """Persist ``session``."""


def _encode_salt(salt: int) -> str:
    return base64.b64encode(salt.to_bytes(LONG_LEN, "little", signed=True)).decode("ascii")


def _decode_b64(value: Any, name: str) -> bytes:
    if not isinstance(value, str):
        raise ValueError(f"invalid binary data of '{name}': not a string")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid binary data of '{name}': {exc}") from exc


def _session_from_json(data: Any) -> Session:
    if not isinstance(data, dict):
        raise ValueError("parsing file: expected a JSON object")
    key = _decode_b64(data.get("key", ""), "key")
    key_hash = _decode_b64(data.get("hash", ""), "hash")
    raw_salt = _decode_b64(data.get("salt", ""), "salt")
    if len(raw_salt) < LONG_LEN:
        raise ValueError(f"invalid binary data of 'salt': need {LONG_LEN} bytes, got {len(raw_salt)}")
    hostname = data.get("hostname", "")
    if not isinstance(hostname, str):
        raise ValueError("parsing file: 'hostname' is not a string")
    return Session(
        key=key,
        hash=key_hash,
        salt=int.from_bytes(raw_salt[:LONG_LEN], "little", signed=True),
        hostname=hostname,
    )


def _session_to_json(session: Session) -> bytes:
    data = {
        "key": base64.b64encode(session.key).decode("ascii"),
        "hash": base64.b64encode(session.hash).decode("ascii"),
        "salt": _encode_salt(session.salt),
        "hostname": session.hostname,
    }
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class FileSessionLoader(SessionLoader):
    """Keeps a session as a JSON file, caching it until the file changes."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = os.fspath(path)
        self._last_edited: int | None = None
        self._cached: Session | None = None

    def load(self) -> Session:
        try:
            info = os.stat(self.path)
        except FileNotFoundError:
            raise SessionNotFoundError(self.path) from None

        if self._cached is not None and info.st_mtime_ns == self._last_edited:
            return self._cached

        with open(self.path, "rb") as f:
            raw = f.read()
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise ValueError(f"parsing file: {exc}") from exc

        session = _session_from_json(data)
        self._cached = session
        self._last_edited = info.st_mtime_ns
        return session

    def store(self, session: Session) -> None:
        directory = os.path.dirname(self.path) or os.curdir
        if not os.path.exists(directory):
            raise FileNotFoundError(f"{directory}: directory not found")
        if not os.path.isdir(directory):
            raise NotADirectoryError(f"{directory}: not a directory")

        data = _session_to_json(session)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(data)


def new_from_file(path: str | os.PathLike[str]) -> FileSessionLoader:
    """Return a loader that keeps its session in the file at ``path``."""
    return FileSessionLoader(path)