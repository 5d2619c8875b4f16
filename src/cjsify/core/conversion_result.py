"""
Data structures representing the output of the conversion pipeline.

This module defines the `ConversionResult` Pydantic model: the generated
units, the entry point, the files that were dropped (and why), the
redefinition warnings and the execution trace.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ConversionResult(BaseModel):
  """
  Container for the results of a corpus conversion.
  """

  outputs: Dict[str, str] = Field(
    default_factory=dict, description="Rewritten source per corpus path, in processing order."
  )
  index_path: str = Field(default="./index.js", description="Corpus path of the aggregate entry point.")
  index_code: str = Field(default="", description="Source of the aggregate entry point.")
  excluded: Dict[str, str] = Field(default_factory=dict, description="Dropped corpus path -> reason.")
  warnings: List[str] = Field(default_factory=list, description="Non-fatal issues, in the order found.")
  graph: Optional[Dict[str, Any]] = Field(default=None, description="Dependency graph artifact, when requested.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def has_exclusions(self) -> bool:
    """
    True if at least one input file is absent from the output set.
    """
    return len(self.excluded) > 0
