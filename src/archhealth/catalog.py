"""Component catalog: boundary validation, JSON loading, and a local builder.

The analyzer consumes a catalog of Component records. Catalogs arrive either
from an external tool as JSON, or from build_catalog(), which scans a local
checkout of a JavaScript/TypeScript project with lightweight regexes.
"""

import json
import os
import re
from collections.abc import Iterable, Mapping
from pathlib import Path

from pydantic import ValidationError

from archhealth.models import Component
from archhealth.utils import log


class CatalogError(ValueError):
    """The catalog is structurally invalid; the analysis cannot start."""


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _describe_validation_error(index: int, exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "<record>"
        problems.append(f"{field}: {err['msg']}")
    return f"component #{index}: " + "; ".join(problems)


def validate_catalog(records: Iterable[Component | Mapping]) -> list[Component]:
    """Validate raw catalog records and return Component models in input order.

    Raises CatalogError on the first malformed record or on a duplicate path.
    """
    components: list[Component] = []
    seen_paths: set[str] = set()
    for index, record in enumerate(records):
        if isinstance(record, Component):
            component = record
        elif isinstance(record, Mapping):
            try:
                component = Component.model_validate(record)
            except ValidationError as exc:
                raise CatalogError(_describe_validation_error(index, exc)) from exc
        else:
            raise CatalogError(
                f"component #{index}: expected an object, got {type(record).__name__}"
            )
        if component.path in seen_paths:
            raise CatalogError(f"component #{index}: duplicate path '{component.path}'")
        seen_paths.add(component.path)
        components.append(component)
    return components


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_catalog(path: str | Path) -> list[Component]:
    """Read a JSON catalog: a list of components or {"components": [...]}."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise CatalogError(f"cannot read catalog {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"catalog {path} is not valid JSON: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("components")
    if not isinstance(data, list):
        raise CatalogError(
            f"catalog {path} must be a list of components or an object with a 'components' list"
        )
    return validate_catalog(data)


def dump_catalog(components: list[Component], indent: int | None = 2) -> str:
    """Serialize components with their camelCase field names."""
    return json.dumps(
        [c.model_dump(by_alias=True) for c in components],
        indent=indent,
    )


# ---------------------------------------------------------------------------
# Local builder
# ---------------------------------------------------------------------------

SOURCE_EXTENSIONS = {".ts", ".tsx", ".js", ".jsx"}
_SKIP_DIRS = {"node_modules", "dist", "build", "coverage", "out"}
_SKIP_FILE_RE = re.compile(r"\.(test|spec)\.[jt]sx?$")

_IMPORT_RE = re.compile(r"""import\s+(?:{[^}]+}|\*\s+as\s+\w+|\w+)\s+from\s+['"](.*?)['"]""")
_EXPORT_RE = re.compile(r"export\s+(?:default\s+)?(?:function|const|class)\s+(\w+)")


def classify_component(rel_path: str) -> str:
    """Guess the component type from its path. Later rules win."""
    path = "/" + rel_path
    kind = "component"
    if "/pages/" in path or "/app/" in path:
        kind = "page"
    if "/api/" in path:
        kind = "api"
    if "/layouts/" in path or "layout." in path:
        kind = "layout"
    if "/utils/" in path or "/lib/" in path:
        kind = "utility"
    return kind


def extract_component(rel_path: str, content: str) -> Component:
    """Build one Component record from a file's path and source text."""
    imports = [m.group(1) for m in _IMPORT_RE.finditer(content)]
    return Component(
        name=os.path.splitext(os.path.basename(rel_path))[0],
        path=rel_path,
        type=classify_component(rel_path),
        imports=imports,
        exports=[m.group(1) for m in _EXPORT_RE.finditer(content)],
        dependencies=[spec for spec in imports if spec.startswith(".")],
        lines_of_code=len(content.split("\n")),
    )


def iter_source_files(root: Path) -> list[str]:
    """Return root-relative POSIX paths of analyzable source files, sorted."""
    found: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in _SKIP_DIRS and not d.startswith(".")]
        for filename in filenames:
            if os.path.splitext(filename)[1] not in SOURCE_EXTENSIONS:
                continue
            if _SKIP_FILE_RE.search(filename):
                continue
            full = Path(dirpath) / filename
            found.append(full.relative_to(root).as_posix())
    return sorted(found)


def build_catalog(root: str | Path) -> list[Component]:
    """Scan a local project and return its component catalog.

    Unreadable files are skipped with a warning.
    """
    root = Path(root)
    components: list[Component] = []
    for rel_path in iter_source_files(root):
        try:
            content = (root / rel_path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            log("catalog", f"Could not read {rel_path}: {exc}", style="yellow")
            continue
        components.append(extract_component(rel_path, content))
    log("catalog", f"Catalogued {len(components)} components under {root}", style="dim")
    return components
