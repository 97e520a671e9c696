from __future__ import annotations
import os
import sqlite3
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Dict, Iterator, List, Mapping as MappingT, Optional, Sequence, Tuple
from datetime import datetime, timezone
from .counter import SENTINEL
from .errors import CorpusMapError

FORMAT_VERSION = "1"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")

SCHEMA = """
CREATE TABLE IF NOT EXISTS frequencies (
  term TEXT PRIMARY KEY,
  count INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS meta (
  key TEXT PRIMARY KEY,
  value TEXT
);
"""


class CorpusFrequencyMap(Mapping):
    """Read-only term -> document count map; absent terms count 0."""

    def __init__(self, counts: MappingT[str, int], meta: Optional[Dict[str, str]] = None):
        self._counts: Dict[str, int] = dict(counts)
        self.meta: Dict[str, str] = dict(meta or {})

    def __getitem__(self, term: str) -> int:
        return self._counts.get(term, 0)

    def __contains__(self, term: object) -> bool:
        return term in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    @property
    def documents(self) -> int:
        return self._counts.get(SENTINEL, 0)

    def top(self, n: int) -> List[Tuple[str, int]]:
        terms = [(t, c) for t, c in self._counts.items() if t != SENTINEL]
        terms.sort(key=lambda x: (-x[1], x[0]))
        return terms[:n]


def save_counts(path: Path, counts: MappingT[str, int], files: Sequence[str] = ()) -> None:
    """
    Write the map next to `path` in a temp file, then rename it over `path`,
    so readers never see a half-written artifact.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    os.close(fd)
    try:
        conn = sqlite3.connect(tmp_name)
        try:
            conn.executescript(SCHEMA)
            conn.executemany(
                "INSERT INTO frequencies(term, count) VALUES (?, ?)",
                [(term, int(c)) for term, c in counts.items()],
            )
            meta = {
                "format_version": FORMAT_VERSION,
                "built_at": _now_iso(),
                "documents": str(int(counts.get(SENTINEL, 0))),
                "files": str(len(files)),
            }
            conn.executemany("INSERT INTO meta(key, value) VALUES (?, ?)", list(meta.items()))
            conn.commit()
        finally:
            conn.close()
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def load_counts(path: Path) -> CorpusFrequencyMap:
    path = Path(path)
    if not path.is_file():
        raise CorpusMapError(f"Frequency map not found: {path}")
    try:
        # read-only: a missing or foreign file must not be turned into an empty database
        conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
        try:
            conn.row_factory = sqlite3.Row
            cur = conn.cursor()
            cur.execute("SELECT term, count FROM frequencies")
            rows = cur.fetchall()
            cur.execute("SELECT key, value FROM meta")
            meta = {r["key"]: r["value"] for r in cur.fetchall()}
        finally:
            conn.close()
    except sqlite3.DatabaseError as ex:
        raise CorpusMapError(f"Corrupt frequency map {path}: {ex}") from ex

    counts: Dict[str, int] = {}
    for r in rows:
        c = r["count"]
        if not isinstance(c, int) or c < 0:
            raise CorpusMapError(f"Corrupt frequency map {path}: bad count {c!r} for {r['term']!r}")
        counts[r["term"]] = c
    if SENTINEL not in counts:
        raise CorpusMapError(f"Corrupt frequency map {path}: missing {SENTINEL!r} entry")
    return CorpusFrequencyMap(counts, meta)


def describe(path: Path) -> Dict[str, str]:
    fm = load_counts(path)
    return {
        "path": str(path),
        "documents": str(fm.documents),
        "terms": str(len(fm) - 1),
        "files": fm.meta.get("files", "?"),
        "built_at": fm.meta.get("built_at", "?"),
        "format_version": fm.meta.get("format_version", "?"),
    }
