"""Conversion phases and the sequential runner that chains them."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)


class PipelinePhase(ABC):
    """One step of a stage document conversion.

    The context starts with ``document_text``, ``settings`` and the per-call
    ``orchestrator``. Loading adds ``value_tree`` and ``load_report``,
    traversal adds ``traversal_output`` and the report phase adds
    ``graph_report``. A phase returns only the keys it adds.
    """

    phase_name: str

    @abstractmethod
    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class PipelineRunner:
    """Runs phases in order, merging each phase's output into the shared context."""

    def __init__(self, phases: Iterable[PipelinePhase]) -> None:
        self.phases: List[PipelinePhase] = list(phases)

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        current = dict(context)
        completed: List[str] = []
        for phase in self.phases:
            logger.debug("Running conversion phase '%s'", phase.phase_name)
            phase_result = phase.run(current)
            if not isinstance(phase_result, dict):
                raise TypeError(f"Phase '{phase.phase_name}' must return dict context.")
            current.update(phase_result)
            completed.append(phase.phase_name)
        current["completed_phases"] = completed
        return current
