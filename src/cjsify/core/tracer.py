"""
Conversion Trace Logger.

Records what the engine decided while converting a corpus:
1. Lifecycle phases (Ingestion, Analysis, Integrity, Rewrite, Emit).
2. Excluded files and the reason they were dropped.
3. Redefinitions in the Definition Index.
4. Import decisions (direct vs deferred) per dependency edge.

The output is a list of plain dictionaries suitable for JSON serialization
(``cjsify --json-trace``).
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  FILE_EXCLUDED = "file_excluded"
  REDEFINITION = "redefinition"
  IMPORT_ACTION = "import_action"
  TYPE_CHECK_REWRITE = "type_check_rewrite"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Records conversion events. One instance per engine run.
  """

  def __init__(self) -> None:
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []

  def start_phase(self, name: str, description: str = "") -> str:
    """Starts a nested phase. Returns the phase id."""
    phase_id = str(uuid.uuid4())
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=phase_id,
        type=TraceEventType.PHASE_START,
        timestamp=time.time(),
        description=name,
        parent_id=parent,
        metadata={"detail": description},
      )
    )
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self) -> None:
    """Ends the current active phase."""
    if not self._active_phases:
      return

    phase_id = self._active_phases.pop()
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=TraceEventType.PHASE_END,
        timestamp=time.time(),
        description="End Phase",
        parent_id=phase_id,
      )
    )

  def log_exclusion(self, path: str, reason: str) -> None:
    self._log_simple(TraceEventType.FILE_EXCLUDED, f"Excluded {path}", {"path": path, "reason": reason})

  def log_redefinition(self, name: str, path: str, previous_path: str) -> None:
    self._log_simple(
      TraceEventType.REDEFINITION,
      f"Redefined {name}",
      {"name": name, "path": path, "previous_path": previous_path},
    )

  def log_import(self, path: str, required_path: str, names: List[str], deferred: bool) -> None:
    """Logs one dependency edge and the import form chosen for it."""
    self._log_simple(
      TraceEventType.IMPORT_ACTION,
      f"{path} -> {required_path}",
      {"path": path, "required_path": required_path, "names": list(names), "deferred": deferred},
    )

  def log_type_check(self, path: str, type_name: str, native: bool) -> None:
    self._log_simple(
      TraceEventType.TYPE_CHECK_REWRITE,
      f"instanceof {type_name}",
      {"path": path, "type": type_name, "native": native},
    )

  def events_of(self, evt_type: TraceEventType) -> List[Dict[str, Any]]:
    """Exported events of a single type."""
    return [e for e in self.export() if e["type"] == evt_type]

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]) -> None:
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()), type=evt_type, timestamp=time.time(), description=desc, parent_id=parent, metadata=meta
      )
    )

  def export(self) -> List[Dict[str, Any]]:
    """Returns list of dicts for JSON serialization."""
    return [asdict(e) for e in self._events]
