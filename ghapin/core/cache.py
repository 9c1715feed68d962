"""
cache.py - Shared cache of resolved action releases

The cache maps an action's repository ("owner/repo") to the most recently
observed release. One cache is shared by every resolution performed during
a run, including resolutions running on worker threads, so reads share a
lock and writes take it exclusively.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Union

from ..utils.version import extract_major_version
from .reference import ActionIdentity


@dataclass(frozen=True)
class ReleaseInfo:
    """Release observed for an action repository"""

    major_version: str
    full_version: str
    sha: str

    @classmethod
    def from_release(cls, full_version: str, sha: str) -> "ReleaseInfo":
        return cls(
            major_version=extract_major_version(full_version),
            full_version=full_version,
            sha=sha,
        )


class ReadWriteLock:
    """Lock allowing many concurrent readers or a single writer.

    Writers waiting for the lock block new readers, so a steady stream of
    reads cannot starve a write.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


IdentityKey = Union[ActionIdentity, str]


class ReleaseCache:
    """Thread-safe mapping of action repository to ReleaseInfo"""

    def __init__(self) -> None:
        self._entries: Dict[str, ReleaseInfo] = {}
        self._lock = ReadWriteLock()

    @staticmethod
    def _key(identity: IdentityKey) -> str:
        return str(identity)

    def get(self, identity: IdentityKey) -> Optional[ReleaseInfo]:
        """
        Look up the cached release of an action repository

        Args:
            identity: ActionIdentity or its "owner/repo" string

        Returns:
            Cached ReleaseInfo, or None if the repository was never resolved
        """
        with self._lock.read_locked():
            return self._entries.get(self._key(identity))

    def put(self, identity: IdentityKey, info: ReleaseInfo) -> None:
        """
        Store the release of an action repository, replacing any previous entry

        Args:
            identity: ActionIdentity or its "owner/repo" string
            info: Release to store
        """
        key = self._key(identity)
        with self._lock.write_locked():
            self._entries[key] = info

    def snapshot(self) -> Dict[str, ReleaseInfo]:
        """Return a copy of all entries"""
        with self._lock.read_locked():
            return dict(self._entries)

    def __contains__(self, identity: object) -> bool:
        if not isinstance(identity, (ActionIdentity, str)):
            return False
        return self.get(identity) is not None

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._entries)
