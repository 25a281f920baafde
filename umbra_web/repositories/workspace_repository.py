from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from umbra_web.services.workspace import Workspace

log = logging.getLogger(__name__)


@dataclass(eq=False)
class WorkspaceRepository:
    """
    Repository pattern: in-memory lookup of workspaces by opaque id.
    Nothing is persisted; a process restart forgets every workspace.

    Workspaces idle for longer than idle_timeout_seconds are closed on the
    next get_or_create, and at most max_workspaces are kept (least recently
    used goes first). None disables either limit.
    """
    factory: Callable[[str], Workspace]
    idle_timeout_seconds: Optional[float] = 1800.0
    max_workspaces: Optional[int] = 500
    clock: Callable[[], float] = time.monotonic

    _items: "OrderedDict[str, Workspace]" = field(default_factory=OrderedDict, init=False)
    _last_access: Dict[str, float] = field(default_factory=dict, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def get(self, workspace_id: Optional[str]) -> Optional[Workspace]:
        if not workspace_id:
            return None
        with self._lock:
            ws = self._items.get(workspace_id)
            if ws is not None:
                self._touch(workspace_id)
            return ws

    def get_or_create(self, workspace_id: Optional[str]) -> Workspace:
        with self._lock:
            evicted = self._evict_idle()
            ws = self._items.get(workspace_id) if workspace_id else None
            if ws is None:
                ws = self.factory(workspace_id or uuid.uuid4().hex)
                self._items[ws.workspace_id] = ws
            self._touch(ws.workspace_id)
            evicted.extend(self._evict_overflow())
        self._close(evicted)
        return ws

    def transient(self) -> Workspace:
        """A fresh workspace that is never stored; for read-only views of unknown sessions."""
        return self.factory(uuid.uuid4().hex)

    def discard(self, workspace_id: Optional[str]) -> bool:
        with self._lock:
            ws = self._pop(workspace_id) if workspace_id else None
        if ws is None:
            return False
        ws.close()
        return True

    def evict_idle(self) -> int:
        with self._lock:
            evicted = self._evict_idle()
        self._close(evicted)
        return len(evicted)

    def close_all(self) -> None:
        with self._lock:
            items = list(self._items.values())
            self._items.clear()
            self._last_access.clear()
        for ws in items:
            ws.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    # -----------------------------
    # Internals (caller holds _lock)
    # -----------------------------
    def _touch(self, workspace_id: str) -> None:
        self._items.move_to_end(workspace_id)
        self._last_access[workspace_id] = self.clock()

    def _pop(self, workspace_id: str) -> Optional[Workspace]:
        self._last_access.pop(workspace_id, None)
        return self._items.pop(workspace_id, None)

    def _evict_idle(self) -> List[Workspace]:
        if self.idle_timeout_seconds is None:
            return []
        cutoff = self.clock() - self.idle_timeout_seconds
        # _items is kept in access order, oldest first
        expired: List[str] = []
        for workspace_id in self._items:
            if self._last_access.get(workspace_id, 0.0) > cutoff:
                break
            expired.append(workspace_id)
        return [self._pop(workspace_id) for workspace_id in expired]

    def _evict_overflow(self) -> List[Workspace]:
        if self.max_workspaces is None:
            return []
        evicted: List[Workspace] = []
        while len(self._items) > max(self.max_workspaces, 1):
            _, ws = self._items.popitem(last=False)
            self._last_access.pop(ws.workspace_id, None)
            evicted.append(ws)
        return evicted

    @staticmethod
    def _close(evicted: List[Workspace]) -> None:
        for ws in evicted:
            ws.close()
            log.info("Workspace %s evicted", ws.workspace_id)
