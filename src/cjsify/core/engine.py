"""
Orchestration Engine for corpus conversion.

The `ModularizeEngine` runs the phase-barriered pipeline. No phase reads state
a previous phase has not fully settled:

1.  **Ingestion**: parse code files, collect shader chunks.
2.  **Shader Chunks**: fold chunks into the chunk table file.
3.  **Analysis**: classify every namespace access of every file and fill the
    Definition Index. Files that cannot be classified are dropped.
4.  **Integrity**: drop files whose requires do not resolve to a surviving
    file, until stable.
5.  **Rewrite**: turn each surviving file into a CommonJS unit using the frozen
    index, in processing order, appending to the entry point.
6.  **Emit**: render the entry point and, when requested, the dependency graph.

Parse or generation failures abort the run (`SourceParseError`,
`SourceGenerationError`). Everything else is a file-scoped exclusion recorded
on the `ConversionResult`.
"""

from pathlib import Path
from typing import Mapping, Optional

from cjsify.analysis.dependencies import DependencyResolver
from cjsify.analysis.provides import ProvideRequireAnalyzer
from cjsify.config import RuntimeConfig
from cjsify.core.conversion_result import ConversionResult
from cjsify.core.forwarding import ForwardingIndex
from cjsify.core.graph import DependencyGraphExporter
from cjsify.core.ingestion import ingest, read_sources
from cjsify.core.module_rewriter import ModuleRewriter
from cjsify.core.registry import DefinitionIndex
from cjsify.core.shader_chunks import ShaderChunkMerger
from cjsify.core.tracer import TraceLogger
from cjsify.utils.console import log_info, log_warning
from cjsify.utils.js_ast import generate_source


class ModularizeEngine:
  """
  Converts a shared-namespace corpus into CommonJS units.

  One engine may run several times; every run starts from a fresh Definition
  Index and trace.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None) -> None:
    """
    Args:
        config (RuntimeConfig, optional): Runtime configuration. Defaults apply when None.
    """
    self.config = config or RuntimeConfig()
    self.index = DefinitionIndex()
    self.tracer = TraceLogger()

  def run_directory(self, input_dir: Path, build_graph: bool = False) -> ConversionResult:
    """
    Reads a corpus from disk and converts it.

    Args:
        input_dir: Root directory of the legacy corpus.
        build_graph: Whether to include the dependency graph in the result.

    Returns:
        ConversionResult: The converted corpus.
    """
    return self.run(read_sources(input_dir, self.config), build_graph=build_graph)

  def run(self, sources: Mapping[str, str], build_graph: bool = False) -> ConversionResult:
    """
    Converts in-memory sources.

    Args:
        sources: Raw contents keyed by corpus-relative path (code files and
            shader chunks).
        build_graph: Whether to include the dependency graph in the result.

    Returns:
        ConversionResult: The converted corpus.

    Raises:
        SourceParseError: If a code file cannot be parsed.
        SourceGenerationError: If a rewritten unit cannot be rendered.
    """
    config = self.config
    self.index = DefinitionIndex()
    self.tracer = TraceLogger()
    tracer = self.tracer
    result = ConversionResult(index_path=config.index_path)

    # 1. Ingestion
    tracer.start_phase("Ingestion", f"{len(sources)} input files")
    ingestion = ingest(sources, config)
    files = ingestion.files
    tracer.end_phase()

    # 2. Shader chunks
    tracer.start_phase("Shader Chunks", config.shader_chunk_path)
    merged = ShaderChunkMerger(config.shader_chunk_path).merge(files, ingestion.shader_chunks)
    if merged:
      log_info(f"Merged {merged} shader chunks into [path]{config.shader_chunk_path}[/path]")
    tracer.end_phase()

    # 3. Analysis
    tracer.start_phase("Analysis", "Provide/Require classification")
    analyzer = ProvideRequireAnalyzer(config, self.index, tracer)
    for path, file in list(files.items()):
      reason = analyzer.analyze(file)
      if reason is not None:
        del files[path]
        self._exclude(result, path, reason.value)
    log_info(f"Definition Index holds {len(self.index)} names")
    tracer.end_phase()

    for redefinition in self.index.redefinitions:
      result.warnings.append(
        f"REDEFINITION of {redefinition.name} in {redefinition.path}, "
        f"previously defined in {redefinition.previous_path}"
      )

    # 4. Integrity
    tracer.start_phase("Integrity", "Dangling require removal")
    resolver = DependencyResolver(self.index)
    for path, name in resolver.check_integrity(files).items():
      self._exclude(result, path, f"missing {name} definition")
    tracer.end_phase()

    # 5. Rewrite
    tracer.start_phase("Rewrite", f"{len(files)} units")
    forwarding = ForwardingIndex(config.index_path, config.code_extension)
    rewriter = ModuleRewriter(config, files, resolver, forwarding, tracer)
    for path, file in files.items():
      program = rewriter.rewrite(file)
      result.outputs[path] = generate_source(program, path, config.indent)
    tracer.end_phase()

    # 6. Emit
    tracer.start_phase("Emit", config.index_path)
    result.index_code = forwarding.generate(config.indent)
    if build_graph:
      result.graph = DependencyGraphExporter(resolver).build(files).to_dict()
    tracer.end_phase()

    result.trace_events = tracer.export()
    return result

  def _exclude(self, result: ConversionResult, path: str, reason: str) -> None:
    log_warning(f"IGNORED [path]{path}[/path] ({reason})")
    result.excluded[path] = reason
    result.warnings.append(f"IGNORED {path} ({reason})")
    self.tracer.log_exclusion(path, reason)
