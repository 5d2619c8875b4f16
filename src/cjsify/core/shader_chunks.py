"""
Shader Chunk Merger.

Raw ``.glsl`` snippets collected during ingestion are folded into the lookup
table of the designated chunk file (``NS.ShaderChunk = { ... };``), one
string-keyed property per snippet, before analysis runs. The table then
becomes an ordinary object provide of that file.
"""

from typing import Mapping, Optional

from calmjs.parse import asttypes

from cjsify.core.units import FileUnit
from cjsify.utils.console import log_warning
from cjsify.utils.js_ast import express_expr, iter_children, js_string, statements_of, walk


class ShaderChunkMerger:
  """
  Appends shader chunk text to the chunk table file.
  """

  def __init__(self, chunk_path: str) -> None:
    """
    Args:
        chunk_path: Corpus path of the chunk table file.
    """
    self.chunk_path = chunk_path

  def merge(self, files: Mapping[str, FileUnit], chunks: Mapping[str, str]) -> int:
    """
    Appends every chunk, in collection order, to the table literal.

    Args:
        files: Ingested code files by path.
        chunks: Chunk name -> raw text.

    Returns:
        Number of properties added. 0 when the chunk file is absent.
    """
    file = files.get(self.chunk_path)
    if file is None or not chunks:
      return 0

    table = self._find_table(file)
    if table is None:
      log_warning(
        f"[path]{self.chunk_path}[/path] does not start with an object literal assignment, shader chunks skipped"
      )
      return 0

    for name, text in chunks.items():
      snippet = express_expr(f"({{{js_string(name)}: {js_string(text)}}})")
      literal = snippet
      if not isinstance(literal, asttypes.Object):
        literal = next(node for _, node in walk(snippet) if isinstance(node, asttypes.Object))
      table.properties.extend(iter_children(literal))

    return len(chunks)

  def _find_table(self, file: FileUnit) -> Optional[asttypes.Object]:
    statements = statements_of(file.program)
    if not statements or not isinstance(statements[0], asttypes.ExprStatement):
      return None

    expression = statements[0].expr
    if isinstance(expression, asttypes.Assign) and isinstance(expression.right, asttypes.Object):
      return expression.right
    return None
