"""In-memory text of the documents the editor has open."""

from __future__ import annotations

import threading


class DocumentStore:
    """Maps a document URI to its full current text.

    Every operation touches a single key under a lock; there is no cross-key
    consistency. Text is replaced wholesale, never patched.
    """

    def __init__(self) -> None:
        self._texts: dict[str, str] = {}
        self._lock = threading.Lock()

    def put(self, uri: str, text: str) -> None:
        with self._lock:
            self._texts[uri] = text

    def get(self, uri: str) -> str | None:
        with self._lock:
            return self._texts.get(uri)

    def remove(self, uri: str) -> None:
        with self._lock:
            self._texts.pop(uri, None)

    def __contains__(self, uri: object) -> bool:
        with self._lock:
            return uri in self._texts

    def __len__(self) -> int:
        with self._lock:
            return len(self._texts)
