"""End-to-end tests for analyze_architecture and the summary report."""

import io
import json

import pytest
from rich.console import Console

from archhealth.analyzer import analyze_architecture
from archhealth.catalog import CatalogError
from archhealth.report import render_summary

# A small Next.js-style project with no duplicates, no cycles and only
# straight-line functions.
HOME = (
    'import { Header } from "../components/Header";\n'
    'import { Card } from "../components/Card";\n'
    "\n"
    "export default function Home() {\n"
    "  return <main><Header /><Card /></main>;\n"
    "}\n"
)
HEADER = "export function Header() {\n  return <header>Title</header>;\n}\n"
CARD = (
    'import styles from "./Home.module.css";\n'
    "\n"
    "export const Card = () => {\n"
    "  return <div className={styles.card}>Card</div>;\n"
    "};\n"
)
FOOTER = "export const Footer = () => <footer>Bye</footer>;\n"


def _component(name, path, type_, deps, content):
    return {
        "name": name,
        "path": path,
        "type": type_,
        "imports": list(deps),
        "exports": [name],
        "dependencies": list(deps),
        "linesOfCode": len(content.split("\n")),
    }


def _write_project(root, files):
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def small_project(tmp_path):
    _write_project(
        tmp_path,
        {
            "src/pages/Home.tsx": HOME,
            "src/components/Header.tsx": HEADER,
            "src/components/Card.tsx": CARD,
            "src/components/Footer.tsx": FOOTER,
        },
    )
    catalog = [
        _component("Home", "src/pages/Home.tsx", "page", ["../components/Header", "../components/Card"], HOME),
        _component("Header", "src/components/Header.tsx", "component", [], HEADER),
        # The stylesheet import names Home but is not itself a catalogued component
        _component("Card", "src/components/Card.tsx", "component", ["./Home.module.css"], CARD),
        _component("Footer", "src/components/Footer.tsx", "component", [], FOOTER),
    ]
    return tmp_path, catalog


# ---------------------------------------------------------------------------
# analyze_architecture
# ---------------------------------------------------------------------------


def test_clean_project_scores_100(small_project):
    root, catalog = small_project
    analysis = analyze_architecture(catalog, root)

    coupling = {m.component: m for m in analysis.coupling}
    header = coupling["src/components/Header.tsx"]
    assert header.afferent_coupling >= 1
    assert header.efferent_coupling == 0
    assert coupling["src/pages/Home.tsx"].efferent_coupling == 2
    assert all(m.score != "high" for m in analysis.coupling)

    assert analysis.duplication == []
    assert analysis.circular_dependencies == []
    assert {m.function_name for m in analysis.complexity} == {"Home", "Header", "Card", "Footer"}
    assert all(m.score == "simple" for m in analysis.complexity)
    assert analysis.health_score == 100


def test_rerun_is_identical_apart_from_timestamp(small_project):
    root, catalog = small_project
    first = json.loads(analyze_architecture(catalog, root).to_json())
    second = json.loads(analyze_architecture(catalog, root, workers=1, batch_size=1).to_json())
    first.pop("analyzedAt")
    second.pop("analyzedAt")
    assert first == second


def test_report_uses_wire_field_names(small_project):
    root, catalog = small_project
    data = json.loads(analyze_architecture(catalog, root).to_json())
    assert set(data) == {
        "analyzedAt",
        "coupling",
        "duplication",
        "complexity",
        "circularDependencies",
        "healthScore",
    }
    assert data["analyzedAt"].endswith("Z")
    assert set(data["coupling"][0]) == {
        "component",
        "afferentCoupling",
        "efferentCoupling",
        "instability",
        "score",
    }
    assert set(data["complexity"][0]) == {
        "file",
        "function",
        "cyclomaticComplexity",
        "cognitiveComplexity",
        "linesOfCode",
        "score",
    }


def test_findings_reduce_the_score(tmp_path):
    body = "\n".join(f"export const value{i} = {i};" for i in range(12))
    _write_project(tmp_path, {"src/a.ts": body, "src/b.ts": body})
    catalog = [
        _component("a", "src/a.ts", "utility", ["./b"], body),
        _component("b", "src/b.ts", "utility", ["./a"], body),
    ]
    analysis = analyze_architecture(catalog, tmp_path)
    assert len(analysis.duplication) == 1
    assert analysis.duplication[0].similarity == 1.0
    assert [c.severity for c in analysis.circular_dependencies] == ["error"]
    # one duplicate pair, one cycle; each file is afferent 1 / efferent 1
    assert analysis.health_score == 100 - 5 - 10


def test_malformed_catalog_aborts(tmp_path):
    with pytest.raises(CatalogError):
        analyze_architecture([{"name": "x", "path": "x.ts"}], tmp_path)


def test_missing_files_only_reduce_coverage(tmp_path):
    catalog = [_component("ghost", "src/ghost.ts", "utility", [], "x\n" * 20)]
    analysis = analyze_architecture(catalog, tmp_path)
    assert analysis.complexity == []
    assert analysis.duplication == []
    assert len(analysis.coupling) == 1
    assert analysis.health_score == 100


# ---------------------------------------------------------------------------
# render_summary
# ---------------------------------------------------------------------------


def test_summary_lists_cycles_and_low_score_warning(tmp_path):
    body = "\n".join(f"export const value{i} = {i};" for i in range(12))
    _write_project(tmp_path, {"src/a.ts": body, "src/b.ts": body})
    catalog = [
        _component("a", "src/a.ts", "utility", ["./b"], body),
        _component("b", "src/b.ts", "utility", ["./a"], body),
    ]
    analysis = analyze_architecture(catalog, tmp_path)
    buffer = io.StringIO()
    render_summary(analysis, out=Console(file=buffer, width=200), healthy_score=90)
    text = buffer.getvalue()
    assert "Health score: 85/100" in text
    assert "src/a.ts <-> src/b.ts" in text
    assert "Similarity: 100%" in text
    assert "src/a.ts -> src/b.ts -> src/a.ts" in text
    assert "Low health score" in text
