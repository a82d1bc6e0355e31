"""Tests for locating symbol usages."""

import pytest

from depmap.services.usage_locator import (
    canonical_name, canonical_names, is_import_line, locate_usages,
)


@pytest.mark.parametrize("raw,expected", [
    ("Button", "Button"),
    ("{ Button }", "Button"),
    ("{Button}", "Button"),
    ("Foo as Bar", "Bar"),
    ("* as ns", "ns"),
    ("a, b", "a"),
    ("{ a as x, b }", "x"),
    ("*", None),
    ("{ }", None),
    ("", None),
])
def test_canonical_name(raw, expected):
    assert canonical_name(raw) == expected


def test_canonical_names_dedup_preserves_order():
    assert canonical_names(["b", "{ a }", "b as b", "*", "c"]) == ["b", "a", "c"]


@pytest.mark.parametrize("line,expected", [
    ("import { Foo } from './foo';", True),
    ("  from .utils import helper", True),
    ("export { Foo } from './foo';", True),
    ("#include \"foo.h\"", True),
    ("using System.Text;", True),
    ("const Foo = require('./foo');", True),
    ("const x = Foo();", False),
    ("from_date = Foo.today()", False),
    ("require('./side-effect');", False),
    ("important = True", False),
])
def test_is_import_line(line, expected):
    assert is_import_line(line) is expected


JS_SOURCE = (
    "import { Foo } from './foo';\n"
    "const a = Foo();\n"
    "const b = FooBar + MyFoo;\n"
    "// Foo again Foo\n"
)


def test_locate_reports_line_column_and_text():
    occurrences = locate_usages(JS_SOURCE, ["{ Foo }"], "a.js", 1)

    assert [(o.line, o.column) for o in occurrences] == [(2, 11), (4, 4), (4, 14)]
    assert {o.symbol for o in occurrences} == {"Foo"}
    assert occurrences[0].line_text == "const a = Foo();"


def test_whole_word_only():
    """Test that `Foo` doesn't match inside `FooBar` or `MyFoo`."""
    occurrences = locate_usages(JS_SOURCE, ["Foo"], "a.js", 1)
    assert all(o.line != 3 for o in occurrences)


def test_never_reports_on_the_import_line():
    """Test exclusion of the declared line even if it doesn't look like an import."""
    content = "const Foo = load('./foo');\nFoo.run();\n"
    occurrences = locate_usages(content, ["Foo"], "a.js", 1)
    assert [o.line for o in occurrences] == [2]


def test_skips_other_import_and_require_lines():
    content = (
        "import { Foo } from './foo';\n"
        "import { Foo as Other } from './other';\n"
        "const helper = require('./helper'); // uses Foo\n"
        "Foo();\n"
    )
    occurrences = locate_usages(content, ["Foo"], "a.js", 1)
    assert [o.line for o in occurrences] == [4]


def test_alias_is_searched_by_local_name():
    content = "import { Foo as Bar } from './foo';\nBar(Foo);\n"
    occurrences = locate_usages(content, ["Foo as Bar"], "a.js", 1)
    assert [(o.symbol, o.column) for o in occurrences] == [("Bar", 1)]


def test_dollar_identifiers():
    content = "import $ from './dollar';\n$('#x');\na$ = 1;\n"
    occurrences = locate_usages(content, ["$"], "a.js", 1)
    assert [(o.line, o.column) for o in occurrences] == [(2, 1)]


def test_python_usage():
    content = "from .utils import helper\nimport os\n\n\ndef main():\n    return helper(os.getcwd())\n"
    occurrences = locate_usages(content, ["helper"], "main.py", 1)

    assert len(occurrences) == 1
    assert occurrences[0].line == 6
    assert occurrences[0].column == 12
    assert occurrences[0].line_text == "return helper(os.getcwd())"


def test_wildcard_and_empty_names_yield_nothing():
    assert locate_usages(JS_SOURCE, ["*"], "a.js", 1) == []
    assert locate_usages(JS_SOURCE, [], "a.js", 1) == []
    assert locate_usages("", ["Foo"], "a.js", 1) == []


def test_results_grouped_by_name_order():
    content = "import { b, a } from './x';\na(b);\nb(a);\n"
    occurrences = locate_usages(content, ["b", "a"], "a.js", 1)
    assert [(o.symbol, o.line) for o in occurrences] == [("b", 2), ("b", 3), ("a", 2), ("a", 3)]


def test_multiline_js_import_is_not_a_usage():
    """Test that binding lines inside `import { ... }` aren't reported."""
    content = "import {\n  Alpha,\n  Beta,\n} from './letters';\nAlpha();\n"
    occurrences = locate_usages(content, ["Alpha", "Beta"], "index.js", 1)
    assert [o.line for o in occurrences] == [5]


def test_parenthesized_python_import_is_not_a_usage():
    content = "from .models import (\n    User,\n    Group,\n)\nUser.objects.all()\n"
    occurrences = locate_usages(content, ["User", "Group"], "views.py", 1)
    assert [(o.symbol, o.line) for o in occurrences] == [("User", 5)]


def test_explicit_end_line_is_skipped():
    # no import rule for this file type; the caller supplies the span
    content = "use {\n  Alpha,\n};\nAlpha();\n"
    occurrences = locate_usages(content, ["Alpha"], "lib.rs", 1, end_line=3)
    assert [o.line for o in occurrences] == [4]
