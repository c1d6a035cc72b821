"""Document loading phase: raw text to value tree."""

import logging
from typing import Any, Dict

from ..loader import DocumentParseError, load_document
from ..pipeline import PipelinePhase

logger = logging.getLogger(__name__)


class DocumentLoadingPhase(PipelinePhase):
    phase_name = "loading"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        text = str(context.get("document_text") or "")
        settings = context.get("settings")
        extra_tags = settings.extra_tags if settings is not None else ()

        try:
            tree = load_document(text, extra_tags=extra_tags)
        except DocumentParseError as error:
            logger.warning("Invalid stage document: %s", error)
            return {
                "value_tree": None,
                "load_report": {"status": "parse_error", "error": error.to_dict()},
            }

        status = "empty" if tree is None else "loaded"
        return {
            "value_tree": tree,
            "load_report": {"status": status, "root_type": type(tree).__name__ if tree is not None else None},
        }
