"""In-memory graph sessions and graph file storage."""

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import structlog

from ..config.config import settings
from ..core.alea_prng import AleaPRNG
from ..core.graph import Bounds, Graph
from ..core.serialization import load_graph_file, save_graph_file
from ..core.view import LabelMode

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionNotFoundError(KeyError):
    """No graph session with the requested id."""


@dataclass
class GraphSession:
    """The single current graph value owned by one client session."""

    id: str
    graph: Graph
    bounds: Bounds
    seed: str
    rng: AleaPRNG
    label_mode: LabelMode = LabelMode.ORDER
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __enter__(self) -> "GraphSession":
        self.lock.acquire()
        return self

    def __exit__(self, *exc) -> None:
        self.lock.release()

    def replace_graph(self, graph: Graph) -> None:
        if graph is not self.graph:
            self.graph = graph
            self.updated_at = _utcnow()


class GraphStore:
    """
    Session manager for graphs.

    The engine holds no locks; every mutation of a session happens inside a
    ``with store.get(graph_id)`` block, which serializes access per graph.
    """

    def __init__(self):
        self._sessions: Dict[str, GraphSession] = {}
        self._lock = threading.Lock()
        self.data_dir: Optional[Path] = None

    def initialize(self, data_dir: Optional[str] = None):
        """Prepare the graph file directory."""
        self.data_dir = Path(data_dir or settings.data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Graph store initialized", data_dir=str(self.data_dir))

    def create(self, graph: Graph, bounds: Bounds, seed: Optional[str] = None) -> GraphSession:
        session_id = str(uuid.uuid4())
        seed = seed or settings.random_seed or session_id[:8]
        session = GraphSession(id=session_id, graph=graph, bounds=bounds, seed=seed, rng=AleaPRNG(seed))
        with self._lock:
            self._sessions[session_id] = session
        logger.info("Graph session created", graph_id=session_id, seed=seed, vertices=len(graph.vertices))
        return session

    def list(self) -> List[GraphSession]:
        with self._lock:
            return sorted(self._sessions.values(), key=lambda s: s.created_at)

    def delete(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)
        logger.info("Graph session deleted", graph_id=session_id)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def get(self, session_id: str) -> GraphSession:
        """
        Look up a session. Use it as a context manager to hold its lock:

            with store.get(graph_id) as session:
                session.replace_graph(...)
        """
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def file_path(self, filename: str) -> Path:
        """Resolve ``filename`` inside the data directory (directory parts are dropped)."""
        if self.data_dir is None:
            self.initialize()
        name = Path(filename).name
        if not name or name.startswith("."):
            raise ValueError(f"Invalid graph file name: {filename!r}")
        if not name.endswith(".json"):
            name = f"{name}.json"
        return self.data_dir / name

    def save(self, session: GraphSession, filename: Optional[str] = None) -> Path:
        return save_graph_file(session.graph, self.file_path(filename or session.id))

    def load(self, filename: str) -> Graph:
        """
        Raises:
            FileNotFoundError: If the file does not exist
            MalformedImportError: If the file is not a valid graph
        """
        return load_graph_file(self.file_path(filename))


# Global store instance
store = GraphStore()
