"""Per-run cache of file contents and tree-sitter syntax trees.

One ContentCache lives for exactly one analysis run and is shared by the
duplication and complexity engines, so each file is read and parsed at most
once: concurrent requests for the same path wait on a per-path loader
lock. Entries are keyed by resolved path and written once; after that they
are only read. Batch loaders fan out over a thread pool in fixed-size
batches and return results in input order.
"""

import importlib
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from tree_sitter import Language, Parser, Tree

from archhealth.config import IO_BATCH_SIZE, config_for_file

# Parsers are not safe to share across threads; keep one per thread per grammar.
_thread_state = threading.local()


def _get_parser(config: dict) -> Parser | None:
    """Get or create this thread's parser for a language config.

    Returns None if the grammar package is not installed.
    """
    parsers = getattr(_thread_state, "parsers", None)
    if parsers is None:
        parsers = _thread_state.parsers = {}
    cache_key = (config["grammar_module"], config["language_func"])
    if cache_key in parsers:
        return parsers[cache_key]
    try:
        mod = importlib.import_module(config["grammar_module"])
        lang_func = getattr(mod, config["language_func"])
        parser = Parser(Language(lang_func()))
    except (ImportError, AttributeError, TypeError, ValueError, OSError):
        parser = None
    parsers[cache_key] = parser
    return parser


def parse_source(source: str, config: dict) -> Tree | None:
    """Parse source text, returning None when it cannot be parsed cleanly."""
    parser = _get_parser(config)
    if parser is None:
        return None
    try:
        tree = parser.parse(source.encode("utf-8"))
    except (ValueError, TypeError):
        return None
    if tree.root_node.has_error:
        return None
    return tree


class ContentCache:
    """Read-through store of file text and parsed trees under a root directory."""

    def __init__(self, root: str | Path, batch_size: int = IO_BATCH_SIZE) -> None:
        self.root = Path(root)
        self.batch_size = max(1, batch_size)
        self._texts: dict[str, str] = {}
        self._trees: dict[str, Tree | None] = {}
        self._lock = threading.Lock()
        # One loader per (kind, path); concurrent callers wait for it instead of loading again
        self._loading: dict[tuple[str, str], threading.Lock] = {}

    def _key(self, rel_path: str) -> str:
        return str((self.root / rel_path).resolve())

    def _loader_lock(self, kind: str, key: str) -> threading.Lock:
        with self._lock:
            return self._loading.setdefault((kind, key), threading.Lock())

    def read(self, rel_path: str) -> str:
        """Return the file's text, or "" if it cannot be read."""
        key = self._key(rel_path)
        with self._lock:
            if key in self._texts:
                return self._texts[key]
        with self._loader_lock("text", key):
            with self._lock:
                if key in self._texts:
                    return self._texts[key]
            try:
                text = Path(key).read_text(encoding="utf-8", errors="replace")
            except OSError:
                text = ""
            with self._lock:
                self._texts[key] = text
            return text

    def tree(self, rel_path: str) -> Tree | None:
        """Return the file's syntax tree, or None if it is unsupported or unparsable."""
        key = self._key(rel_path)
        with self._lock:
            if key in self._trees:
                return self._trees[key]
        with self._loader_lock("tree", key):
            with self._lock:
                if key in self._trees:
                    return self._trees[key]
            config = config_for_file(rel_path)
            text = self.read(rel_path)
            parsed = parse_source(text, config) if config is not None and text else None
            with self._lock:
                self._trees[key] = parsed
            return parsed

    def _map_batched(self, func, rel_paths: list[str]) -> list:
        results: list = []
        if not rel_paths:
            return results
        with ThreadPoolExecutor(max_workers=self.batch_size) as executor:
            for start in range(0, len(rel_paths), self.batch_size):
                batch = rel_paths[start:start + self.batch_size]
                # map() yields in submission order regardless of completion order
                results.extend(executor.map(func, batch))
        return results

    def read_many(self, rel_paths: list[str]) -> list[str]:
        """Read files in parallel batches; results follow rel_paths order."""
        return self._map_batched(self.read, rel_paths)

    def parse_many(self, rel_paths: list[str]) -> list[Tree | None]:
        """Parse files in parallel batches; results follow rel_paths order."""
        return self._map_batched(self.tree, rel_paths)
