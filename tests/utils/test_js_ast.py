"""
Tests for the JavaScript syntax tree helpers.

Verifies that:
1. Parse failures surface as `SourceParseError` naming the file.
2. Templates accept node substitutions and reject mismatched counts.
3. Child replacement and name collection work on parsed trees.
"""

import pytest
from calmjs.parse import asttypes

from cjsify.utils.js_ast import (
  SourceParseError,
  collect_names,
  express,
  express_expr,
  generate_source,
  is_identifier,
  js_string,
  make_identifier,
  parse_source,
  replace_child,
  statements_of,
  to_identifier,
  walk,
)
from tests.conftest import compact


def test_parse_error_names_file():
  with pytest.raises(SourceParseError, match="broken.js"):
    parse_source("var = ;", "broken.js")


def test_generate_roundtrip():
  program = parse_source("var a = 1;")
  assert compact(generate_source(program)) == "vara=1;"


def test_statements_of_returns_top_level():
  program = parse_source("var a = 1; f(a);")
  statements = statements_of(program)
  assert len(statements) == 2
  assert isinstance(statements[0], asttypes.VarStatement)


def test_express_fills_holes_in_order():
  """
  Scenario: Template with two placeholders.
  Expectation: Nodes are substituted left to right.
  """
  statement = express("f($, $);", make_identifier("first"), make_identifier("second"))
  assert compact(generate_source(statement)) == "f(first,second);"


def test_express_rejects_wrong_hole_count():
  with pytest.raises(ValueError):
    express("f($, $);", make_identifier("only"))


def test_express_expr_returns_expression():
  node = express_expr("a.b")
  assert isinstance(node, asttypes.DotAccessor)


def test_replace_child_by_identity():
  program = parse_source("a + b;")
  parent, target = next((p, n) for p, n in walk(program) if is_identifier(n, "b"))
  replace_child(parent, target, make_identifier("c"))
  assert compact(generate_source(program)) == "a+c;"


def test_replace_child_unknown_node():
  program = parse_source("a + b;")
  with pytest.raises(ValueError):
    replace_child(statements_of(program)[0], make_identifier("x"), make_identifier("y"))


def test_collect_names_skips_property_names():
  """
  Scenario: `b.c` and a declared `a`.
  Expectation: `a` and `b` are taken, the property `c` is not.
  """
  names = collect_names(parse_source("var a = b.c; d(a);"))
  assert {"a", "b", "d"} <= names
  assert "c" not in names


def test_walk_is_document_order():
  program = parse_source("first; second; third;")
  order = [n.value for _, n in walk(program) if isinstance(n, asttypes.Identifier)]
  assert order == ["first", "second", "third"]


def test_to_identifier():
  assert to_identifier("foo-bar.min") == "foo_bar_min"
  assert to_identifier("3d") == "_3d"
  assert to_identifier("Vector3") == "Vector3"


def test_js_string_escapes_quotes():
  assert js_string("it's") == "'it\\'s'"
  assert js_string("./math/Vector3") == "'./math/Vector3'"


def test_to_identifier_avoids_reserved_words():
  assert to_identifier("new") == "_new"
  assert to_identifier("require") == "_require"
  assert to_identifier("exports") == "_exports"


def test_js_string_escapes_line_terminators():
  assert js_string("a\nb\u2028c\u2029d") == "'a\\nb\\u2028c\\u2029d'"


def test_comments_kept_by_parser():
  code = generate_source(parse_source("/** header */\n// note\nvar a = 1;"))
  assert "/** header */" in code
  assert "// note" in code


def test_replace_child_moves_leading_comment():
  """
  Scenario: The replaced expression starts a commented statement.
  Expectation: The comment is attached to the replacement.
  """
  program = parse_source("// lead\nold.value = 1;")
  assign = statements_of(program)[0].expr
  replace_child(assign, assign.left, make_identifier("fresh"))

  code = generate_source(program)
  assert "// lead" in code
  assert compact(code).endswith("fresh=1;")
