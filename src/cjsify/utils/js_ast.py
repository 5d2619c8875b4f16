"""
JavaScript Syntax Tree Helpers.

Thin layer over ``calmjs.parse`` used by every pass of the converter:

1.  **Parsing / Generation**: ``parse_source`` and ``generate_source`` wrap the
    ES5 parser and the pretty-print unparser, logging the offending path and
    re-raising as ``SourceParseError`` / ``SourceGenerationError``.
2.  **Snippets**: ``express`` and ``express_expr`` build new nodes by parsing
    small source templates, so every synthesized node is produced by the same
    parser the unparser expects.
3.  **Traversal**: ``walk`` yields ``(parent, node)`` pairs in document order
    and ``replace_child`` swaps a node in place inside its parent.
"""

import re
from typing import Iterator, List, Optional, Set, Tuple

from calmjs.parse import asttypes, es5
from calmjs.parse.unparsers.es5 import pretty_print

from cjsify.utils.console import log_error

# Identifier used in snippets for "substitute the given node here".
SNIPPET_HOLE = "$"

COMMENT_TYPES = (asttypes.Comments, asttypes.LineComment, asttypes.BlockComment)

# Words a generated binding must never take: ES5 reserved words and the
# CommonJS module scope names.
RESERVED_WORDS = frozenset(
  {
    "break", "case", "catch", "class", "const", "continue", "debugger", "default", "delete", "do",
    "else", "enum", "export", "extends", "false", "finally", "for", "function", "if", "implements",
    "import", "in", "instanceof", "interface", "let", "new", "null", "package", "private", "protected",
    "public", "return", "static", "super", "switch", "this", "throw", "true", "try", "typeof",
    "var", "void", "while", "with", "yield", "arguments", "eval", "undefined",
    "require", "exports", "module",
  }
)

LITERAL_TYPES = (
  asttypes.String,
  asttypes.Number,
  asttypes.Boolean,
  asttypes.Null,
  asttypes.Regex,
)

_INVALID_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_$]")

_STRING_ESCAPES = str.maketrans(
  {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
  }
)


class SourceParseError(ValueError):
  """Raised when a source file cannot be parsed into a syntax tree."""


class SourceGenerationError(ValueError):
  """Raised when a syntax tree cannot be rendered back to source text."""


def parse_source(source: str, path: str = "<snippet>") -> asttypes.Node:
  """
  Parses ES5 source text into a program node.

  Comments are kept on the tree so the unparser can emit them again.

  Args:
      source: Raw JavaScript source.
      path: Path reported when parsing fails.

  Returns:
      The parsed program node.

  Raises:
      SourceParseError: If the text is not valid ES5.
  """
  try:
    return es5(source, with_comments=True)
  except Exception as e:
    log_error(f"error parsing [path]{path}[/path]")
    raise SourceParseError(f"{path}: {e}") from e


def generate_source(program: asttypes.Node, path: str = "<snippet>", indent: str = "\t") -> str:
  """
  Renders a program node back into JavaScript source text.

  Args:
      program: The program (or any node) to render.
      path: Path reported when generation fails.
      indent: Indentation unit for nested blocks.

  Returns:
      The generated source.

  Raises:
      SourceGenerationError: If the unparser rejects the tree.
  """
  try:
    return pretty_print(program, indent_str=indent)
  except Exception as e:
    log_error(f"error generating [path]{path}[/path]")
    raise SourceGenerationError(f"{path}: {e}") from e


def statements_of(program: asttypes.Node) -> List[asttypes.Node]:
  """Returns the top level statements of a program as a new list."""
  return [child for child in program.children() if isinstance(child, asttypes.Node)]


def new_program(statements: List[asttypes.Node]) -> asttypes.Node:
  """
  Builds a program node holding ``statements``.

  The program class is taken from the parser output so the unparser
  recognises it.
  """
  template = es5("")
  return type(template)(list(statements))


def express(source: str, *holes: asttypes.Node) -> asttypes.Node:
  """
  Parses a single statement template.

  Every ``$`` identifier in ``source`` is replaced, in document order, by the
  next node of ``holes``.

  Args:
      source: Source of exactly one statement.
      *holes: Nodes substituted for the ``$`` placeholders.

  Returns:
      The statement node.
  """
  statement = statements_of(es5(source))[0]
  if holes:
    _fill_holes(statement, list(holes))
  return statement


def express_expr(source: str, *holes: asttypes.Node) -> asttypes.Node:
  """
  Parses an expression template and returns the expression node.

  Args:
      source: Expression source, without a trailing semicolon.
      *holes: Nodes substituted for the ``$`` placeholders.

  Returns:
      The expression node (a ``GroupingOp`` when the template is parenthesised).
  """
  statement = express(f"{source};", *holes)
  return statement.expr


def make_identifier(name: str) -> asttypes.Node:
  """Returns a fresh identifier expression node."""
  return express_expr(name)


def js_string(value: str) -> str:
  """
  Renders a single-quoted JavaScript string literal.

  Line terminators (including U+2028 and U+2029) are escaped, so any text,
  e.g. a whole shader chunk, fits on one line.
  """
  return f"'{value.translate(_STRING_ESCAPES)}'"


def to_identifier(name: str) -> str:
  """
  Coerces an arbitrary file stem into a valid JavaScript identifier.

  Example:
    >>> to_identifier("foo-bar.min")
    'foo_bar_min'
    >>> to_identifier("new")
    '_new'
  """
  cleaned = _INVALID_IDENTIFIER_CHARS.sub("_", name) or "_"
  if cleaned[0].isdigit() or cleaned in RESERVED_WORDS:
    cleaned = f"_{cleaned}"
  return cleaned


def iter_children(node: asttypes.Node) -> Iterator[asttypes.Node]:
  """Yields the direct child nodes of ``node``, skipping empty slots."""
  for child in node.children():
    if isinstance(child, (list, tuple)):
      for item in child:
        if isinstance(item, asttypes.Node):
          yield item
    elif isinstance(child, asttypes.Node):
      yield child


def walk(root: asttypes.Node) -> Iterator[Tuple[asttypes.Node, asttypes.Node]]:
  """
  Yields every ``(parent, node)`` pair below ``root`` in document order.

  The traversal is iterative, so deeply nested expressions do not hit the
  recursion limit. Callers must not mutate the tree while iterating.
  """
  stack = [(root, child) for child in reversed(list(iter_children(root)))]
  while stack:
    parent, node = stack.pop()
    yield parent, node
    for child in reversed(list(iter_children(node))):
      stack.append((node, child))


def replace_child(parent: asttypes.Node, old: asttypes.Node, new: asttypes.Node) -> None:
  """
  Replaces ``old`` by ``new`` inside ``parent``, matching by identity.

  Comments leading ``old`` move to ``new``.

  Raises:
      ValueError: If ``old`` is not a direct child of ``parent``.
  """
  for attr, value in vars(parent).items():
    if value is old:
      carry_comments(old, new)
      setattr(parent, attr, new)
      return
    if isinstance(value, list):
      for i, item in enumerate(value):
        if item is old:
          carry_comments(old, new)
          value[i] = new
          return
  raise ValueError(f"{type(old).__name__} is not a child of {type(parent).__name__}")


def is_property_key(parent: Optional[asttypes.Node], node: asttypes.Node) -> bool:
  """
  True when ``node`` names a property rather than a binding.

  Covers ``obj.name``, object literal keys and getter/setter keys.
  """
  if parent is None:
    return False
  if isinstance(parent, asttypes.DotAccessor):
    return parent.identifier is node
  if isinstance(parent, asttypes.Assign) and parent.op == ":":
    return parent.left is node
  return getattr(parent, "prop_name", None) is node


def is_identifier(node: asttypes.Node, name: Optional[str] = None) -> bool:
  """True when ``node`` is an identifier (optionally with the given name)."""
  if not isinstance(node, asttypes.Identifier):
    return False
  return name is None or node.value == name


def collect_names(program: asttypes.Node) -> Set[str]:
  """
  Collects every identifier declared or referenced in ``program``.

  Property keys are left out: ``a.b`` reserves ``a`` only.
  """
  names: Set[str] = set()
  for parent, node in walk(program):
    if isinstance(node, asttypes.Identifier) and not is_property_key(parent, node):
      names.add(node.value)
  return names


def _fill_holes(statement: asttypes.Node, holes: List[asttypes.Node]) -> None:
  sites = [(parent, node) for parent, node in walk(statement) if is_identifier(node, SNIPPET_HOLE)]
  if len(sites) != len(holes):
    raise ValueError(f"Template expects {len(sites)} substitutions, got {len(holes)}")
  for (parent, site), replacement in zip(sites, holes):
    replace_child(parent, site, replacement)


def carry_comments(old: asttypes.Node, new: asttypes.Node) -> None:
  """
  Moves the comments leading ``old`` onto ``new``.

  The parser attaches a leading comment to one of the nodes starting at the
  comment's position, so ``old`` and its leftmost descendants are searched.
  Nothing moves when ``new`` already carries comments.
  """
  if getattr(new, "comments", None):
    return

  node = old
  while node is not None:
    comments = getattr(node, "comments", None)
    if comments:
      node.comments = None
      new.comments = comments
      return
    node = next((child for child in iter_children(node) if not isinstance(child, COMMENT_TYPES)), None)
