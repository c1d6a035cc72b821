"""YAML loader for stage documents with the pipeline's custom tags."""

from collections.abc import Hashable
from typing import Any, Iterable, Optional, Type

import yaml
from yaml.constructor import ConstructorError

MERGE_TAG = "tag:yaml.org,2002:merge"

PIPELINE_TAGS = (
    "!GenericPipeline",
    "!BasicStage",
    "!MonitoringService",
    "!Conditional",
    "!Loop",
    "!FilePath",
    "!Expression",
    "!MultiLine",
)


class DocumentParseError(ValueError):
    """Raised when a stage document is not valid YAML for the pipeline dialect."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        self.message = message
        self.line = line
        self.column = column
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"{message}{location}")

    def to_dict(self) -> dict:
        return {"message": self.message, "line": self.line, "column": self.column}


def construct_tagged_payload(loader: yaml.SafeLoader, node: yaml.Node) -> Any:
    """Tags are annotations only: the payload is returned as plain data."""
    if isinstance(node, yaml.MappingNode):
        return loader.construct_mapping(node, deep=True)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_scalar(node)


class StageDocumentLoader(yaml.SafeLoader):
    """SafeLoader that understands the pipeline tag set and rejects duplicate keys."""

    def construct_mapping(self, node: yaml.Node, deep: bool = False) -> dict:
        if isinstance(node, yaml.MappingNode):
            seen = set()
            for key_node, _ in node.value:
                if key_node.tag == MERGE_TAG:
                    continue
                key = self.construct_object(key_node, deep=deep)
                if not isinstance(key, Hashable):
                    continue
                if key in seen:
                    raise ConstructorError(
                        "while constructing a mapping",
                        node.start_mark,
                        f"found duplicate key {key!r}",
                        key_node.start_mark,
                    )
                seen.add(key)
        return super().construct_mapping(node, deep=deep)


for _tag in PIPELINE_TAGS:
    StageDocumentLoader.add_constructor(_tag, construct_tagged_payload)


def build_loader(extra_tags: Iterable[str] = ()) -> Type[StageDocumentLoader]:
    extra = [tag for tag in extra_tags if tag not in PIPELINE_TAGS]
    if not extra:
        return StageDocumentLoader

    class ExtendedStageDocumentLoader(StageDocumentLoader):
        pass

    for tag in extra:
        ExtendedStageDocumentLoader.add_constructor(tag, construct_tagged_payload)
    return ExtendedStageDocumentLoader


def load_document(text: str, extra_tags: Iterable[str] = ()) -> Any:
    """Parse ``text`` into a plain value tree, or ``None`` for an empty document."""
    if not text or not text.strip():
        return None
    try:
        return yaml.load(text, Loader=build_loader(extra_tags))
    except yaml.MarkedYAMLError as error:
        mark = error.problem_mark or error.context_mark
        message = error.problem or error.context or str(error)
        if mark is None:
            raise DocumentParseError(message) from error
        raise DocumentParseError(message, line=mark.line + 1, column=mark.column + 1) from error
    except yaml.YAMLError as error:
        raise DocumentParseError(str(error)) from error
