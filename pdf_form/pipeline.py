"""Item pipeline dispatching PDF form extraction and mapping."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .backends.base import FormBackend
from .binary import BinaryCodec, output_filename, prepare_binary, read_binary, resolve_binary
from .classifier import describe_fields
from .document import PDFFormDocument
from .parameters import FormParameters, ParameterReader, StaticParameters
from .types import ExtractionResult, MappingResult, Operation, PipelineItem
from .utils import get_logger, time_block
from .writer import apply_assignments, flatten

LOGGER = get_logger(__name__)

ItemInput = Union[PipelineItem, Mapping[str, Any]]

NODE_DESCRIPTION: Dict[str, Any] = {
    "displayName": "PDF Form",
    "name": "pdfForm",
    "group": ["transform"],
    "version": 1,
    "description": "Extract and map PDF form fields",
    "properties": [
        {
            "name": "operation",
            "type": "options",
            "options": [
                {"name": "Extract Fields", "value": Operation.EXTRACT_FIELDS.value},
                {"name": "Map Fields", "value": Operation.MAP_FIELDS.value},
            ],
            "default": Operation.EXTRACT_FIELDS.value,
        },
        {"name": "binaryPropertyName", "type": "string", "default": "data", "required": True},
        {"name": "outputFilename", "type": "string", "default": "", "show": [Operation.MAP_FIELDS.value]},
        {
            "name": "fields",
            "type": "fixedCollection",
            "multipleValues": True,
            "show": [Operation.MAP_FIELDS.value],
            "values": [
                {"name": "fieldName", "type": "string", "default": ""},
                {"name": "fieldValue", "type": "string", "default": ""},
            ],
        },
    ],
}


class ItemState(str, Enum):
    """Processing states a single item moves through."""

    START = "start"
    BINARY_RESOLVED = "binary_resolved"
    DOCUMENT_LOADED = "document_loaded"
    OPERATION_DISPATCHED = "operation_dispatched"
    EXTRACT_DONE = "extract_done"
    MAP_DONE = "map_done"
    EMITTED = "emitted"
    ERROR_EMITTED = "error_emitted"


def extract_fields(document: PDFFormDocument) -> ExtractionResult:
    """Describe every form field of ``document``."""
    return describe_fields(document.get_form())


def map_fields(document: PDFFormDocument, parameters: FormParameters) -> tuple[bytes, MappingResult]:
    """Fill, flatten and serialize ``document``; returns the new PDF bytes."""

    form = document.get_form()
    applied = apply_assignments(document, form, parameters.assignments)
    flatten(document, form)
    data = document.serialize(add_default_page=False, use_object_streams=True)
    result = MappingResult(
        success=True,
        total_fields=len(parameters.assignments),
        mapped_fields=list(parameters.assignments),
        applied_fields=applied,
    )
    return data, result


class PDFFormProcessor:
    """Process pipeline items one at a time with optional continue-on-fail."""

    def __init__(
        self,
        parameters: Optional[Union[ParameterReader, Mapping[str, Any]]] = None,
        *,
        continue_on_fail: bool = False,
        codec: Optional[BinaryCodec] = None,
        backend: Optional[FormBackend] = None,
    ) -> None:
        if parameters is None or isinstance(parameters, Mapping):
            parameters = StaticParameters(dict(parameters or {}))
        self.parameters: ParameterReader = parameters
        self.continue_on_fail = continue_on_fail
        self.codec = codec or BinaryCodec()
        self.backend = backend

    def execute(self, items: Iterable[ItemInput]) -> List[PipelineItem]:
        """Return one output record per input item, in order."""

        results: List[PipelineItem] = []
        for index, raw_item in enumerate(items):
            item = PipelineItem.from_dict(raw_item)
            try:
                results.append(self.execute_item(item, index))
            except Exception as exc:
                if not self.continue_on_fail:
                    raise
                LOGGER.warning("Item %d failed: %s", index, exc)
                self._transition(index, ItemState.ERROR_EMITTED)
                results.append(PipelineItem(json={"error": str(exc)}, binary=item.binary))
        return results

    def execute_item(self, item: PipelineItem, index: int = 0) -> PipelineItem:
        self._transition(index, ItemState.START)
        parameters = FormParameters.read(self.parameters, index)

        entry = resolve_binary(item.binary, parameters.binary_property_name)
        data = read_binary(entry, self.codec)
        self._transition(index, ItemState.BINARY_RESOLVED)

        with time_block(LOGGER, f"{parameters.operation.value} for item {index}"):
            with PDFFormDocument.load(data, backend=self.backend) as document:
                self._transition(index, ItemState.DOCUMENT_LOADED)
                self._transition(index, ItemState.OPERATION_DISPATCHED)

                if parameters.operation is Operation.MAP_FIELDS:
                    output, result = map_fields(document, parameters)
                    self._transition(index, ItemState.MAP_DONE)
                    LOGGER.info(
                        "Mapped %d of %d fields for item %d",
                        len(result.applied_fields),
                        result.total_fields,
                        index,
                    )
                    binary = {
                        parameters.binary_property_name: prepare_binary(
                            output,
                            output_filename(parameters.output_filename, entry),
                            self.codec,
                        )
                    }
                    record = PipelineItem(json=result.to_dict(), binary=binary)
                else:
                    extraction = extract_fields(document)
                    self._transition(index, ItemState.EXTRACT_DONE)
                    LOGGER.info("Extracted %d fields for item %d", extraction.total_fields, index)
                    record = PipelineItem(json=extraction.to_dict())

        self._transition(index, ItemState.EMITTED)
        return record

    @staticmethod
    def _transition(index: int, state: ItemState) -> None:
        LOGGER.debug("Item %d: %s", index, state.value)


def process_items(
    items: Iterable[ItemInput],
    parameters: Optional[Union[ParameterReader, Mapping[str, Any]]] = None,
    *,
    continue_on_fail: bool = False,
) -> List[PipelineItem]:
    """Convenience wrapper around :class:`PDFFormProcessor`."""
    return PDFFormProcessor(parameters, continue_on_fail=continue_on_fail).execute(items)


__all__ = [
    "ItemState",
    "NODE_DESCRIPTION",
    "PDFFormProcessor",
    "extract_fields",
    "map_fields",
    "process_items",
]
