"""
In-memory DuckDB session shared by the network builder and the ``OmicNet`` engine.

Loading tables are only visible to SQL for the duration of a ``registered``
block; the last built edge list stays published under ``edges`` until it is
replaced.
"""
from __future__ import annotations
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Union
import duckdb
import pyarrow as pa

from omicnet.logging_utils import get_logger

logger = get_logger(__name__)

EDGES_VIEW = "edges"


class DuckDBConnection:
    """In-memory DuckDB session used to join and filter loading tables."""
    def __init__(self, threads: Optional[int] = None):
        self._database = ":memory:"
        self.conn = duckdb.connect(self._database)
        self._views: List[str] = []
        if threads:
            self.conn.execute(f"SET threads={int(threads)}")

    def execute(self, query: str, params: Optional[Union[list, dict]] = None) -> duckdb.DuckDBPyConnection:
        return self.conn.execute(query, params)

    def query(self, query: str, params: Optional[Union[list, dict]] = None) -> pa.Table:
        table = self.execute(query, params).arrow()
        # Newer DuckDB releases hand back a RecordBatchReader here
        if hasattr(table, "read_all"):
            return table.read_all()
        return table

    @contextmanager
    def registered(self, **tables: pa.Table) -> Iterator["DuckDBConnection"]:
        """Expose Arrow tables under the given names for the body of the block only."""
        clash = [name for name in tables if name in self._views]
        if clash: raise ValueError(f"Tables already registered: {clash}")
        for name, table in tables.items():
            self.conn.register(name, table)
            self._views.append(name)
        try:
            yield self
        finally:
            for name in tables:
                self.conn.unregister(name)
                self._views.remove(name)

    def publish_edges(self, edges: pa.Table):
        """Make ``edges`` queryable as the ``edges`` view, replacing any earlier edge list."""
        if EDGES_VIEW in self._views:
            self.conn.unregister(EDGES_VIEW)
        else:
            self._views.append(EDGES_VIEW)
        self.conn.register(EDGES_VIEW, edges)
        logger.debug("Published %d edges as %r", edges.num_rows, EDGES_VIEW)

    @property
    def views(self) -> Dict[str, int]:
        """Currently registered names and their row counts."""
        return {name: self.execute(f'SELECT COUNT(*) FROM "{name}"').fetchone()[0] for name in self._views}

    def close(self):
        self._views.clear()
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()

    def __repr__(self) -> str:
        return f"DuckDBConnection(database={self._database!r}, views={self._views})"
