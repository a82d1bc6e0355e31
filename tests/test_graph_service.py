"""Tests for dependency graph building."""

from collections import Counter

from depmap.models.graph import GraphLink
from depmap.models.repo import FileRecord
from depmap.services.graph_service import GraphService
from depmap.services.languages import language_for


def _files(*paths, size=100):
    return [
        FileRecord(name=p.rsplit("/", 1)[-1], path=p, size=size, language=language_for(p))
        for p in paths
    ]


def test_js_named_import_scenario():
    """Test `import { Button }` resolving to components/Button.js."""
    files = _files("a.js", "components/Button.js")
    contents = ["import { Button } from './components/Button';\n", "export const Button = 1;\n"]

    graph = GraphService.build_graph(files, contents)

    assert graph.links == [GraphLink(source=0, target=1)]
    deps = graph.dependencies_of(0)
    assert len(deps) == 1
    assert deps[0].source_index == 0
    assert deps[0].target_index == 1
    assert deps[0].names == ["Button"]
    assert deps[0].line == 1
    assert deps[0].target_path == "./components/Button"


def test_python_relative_import_scenario():
    """Test that `import os` is ignored and `from .utils` resolves."""
    files = _files("main.py", "utils.py")
    contents = ["from .utils import helper\nimport os\n\nhelper()\n", "def helper():\n    pass\n"]

    graph = GraphService.build_graph(files, contents)

    assert len(graph.links) == 1
    assert graph.dependencies_of(0)[0].target_index == 1
    assert graph.dependencies_of(1) == []


def test_missing_content_keeps_edgeless_node():
    """Test that one unavailable file out of 50 doesn't stop the build."""
    files = _files(*[f"mod{i}.js" for i in range(50)], "shared.js")
    contents = ["import { helper } from './shared';\n"] * 50
    contents[7] = None

    graph = GraphService.build_graph(files, contents)

    assert len(graph.nodes) == 51
    assert graph.analyzed_files == 49
    assert len(graph.links) == 49
    assert all(link.target == 50 for link in graph.links)
    assert 7 not in graph.details
    assert graph.dependencies_of(7) == []


def test_contents_may_cover_only_a_prefix():
    files = _files("a.js", "b.js", "c.js")
    graph = GraphService.build_graph(files, ["import b from './b';\n"])

    assert len(graph.nodes) == 3
    assert graph.analyzed_files == 1
    assert graph.links == [GraphLink(source=0, target=1)]


def test_parallel_edges_are_kept():
    """Test that every import statement becomes its own edge."""
    files = _files("a.js", "b.js")
    content = "import { one } from './b';\nimport { two } from './b';\n"

    graph = GraphService.build_graph(files, [content, None])

    assert graph.links == [GraphLink(0, 1), GraphLink(0, 1)]
    assert [d.names for d in graph.dependencies_of(0)] == [["one"], ["two"]]
    assert [d.line for d in graph.dependencies_of(0)] == [1, 2]


def test_self_import_is_kept():
    files = _files("button.js")
    graph = GraphService.build_graph(files, ["import x from './button';\n"])
    assert graph.links == [GraphLink(0, 0)]


def test_detailed_index_matches_edge_list():
    files = _files("src/alpha.js", "src/beta.js", "src/gamma.js", "src/delta.py")
    contents = [
        "import { beta } from './beta';\nimport { gamma } from './gamma';\n",
        "const gamma = require('./gamma');\n",
        "// no imports\n",
        "from .alpha import nothing\n",   # resolves to src/alpha.js by substring
    ]

    graph = GraphService.build_graph(files, contents)
    edge_counts = Counter(link.source for link in graph.links)

    for index in range(len(files)):
        deps = graph.dependencies_of(index)
        assert all(d.source_index == index for d in deps)
        assert len(deps) == edge_counts.get(index, 0)

    assert [d.target_index for d in graph.dependencies_of(0)] == [1, 2]


def test_nodes_carry_color_and_radius():
    files = [
        FileRecord(name="tiny.js", path="tiny.js", size=10, language="javascript"),
        FileRecord(name="mid.py", path="mid.py", size=10_000, language="python"),
        FileRecord(name="huge.bin.md", path="huge.bin.md", size=10_000_000, language="markdown"),
    ]
    nodes = GraphService.build_nodes(files)

    assert [n.color for n in nodes] == ["#f1e05a", "#3572a5", "#083fa1"]
    assert [n.radius for n in nodes] == [8.0, 10.0, 20.0]
    assert [n.index for n in nodes] == [0, 1, 2]


def test_multiline_statement_keeps_its_line_span():
    files = _files("index.js", "letters.js")
    content = "// header\nimport {\n  Alpha,\n  Beta,\n} from './letters';\n"

    graph = GraphService.build_graph(files, [content, None])

    dep = graph.dependencies_of(0)[0]
    assert (dep.line, dep.end_line) == (2, 5)
    assert list(dep.line_span()) == [2, 3, 4, 5]
