"""Classification of parsed values into pipeline stages."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class StageKind(str, Enum):
    STAGE = "stage"
    LEAF = "leaf"
    INVALID = "invalid"


@dataclass(frozen=True)
class StageView:
    """Normalized view over a stage mapping.

    ``outputs`` keeps only string anchor names, ``inputs`` is always a list
    and ``runs`` is empty unless the mapping carried a sequence.
    """

    name: Optional[str]
    outputs: Dict[str, str] = field(default_factory=dict)
    inputs: List[str] = field(default_factory=list)
    runs: List[Any] = field(default_factory=list)


def classify(value: Any) -> StageKind:
    if isinstance(value, dict):
        return StageKind.STAGE if value else StageKind.INVALID
    return StageKind.LEAF


def stage_view(value: Dict[str, Any]) -> StageView:
    name = value.get("name")
    return StageView(
        name=str(name) if name else None,
        outputs=_string_outputs(value.get("outputs")),
        inputs=_input_names(value.get("inputs")),
        runs=list(value["runs"]) if isinstance(value.get("runs"), list) else [],
    )


def _string_outputs(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    return {str(key): anchor for key, anchor in raw.items() if isinstance(anchor, str)}


def _input_names(raw: Any) -> List[str]:
    if isinstance(raw, str):
        return [raw] if raw else []
    if isinstance(raw, list):
        return [item for item in raw if isinstance(item, str) and item]
    return []
