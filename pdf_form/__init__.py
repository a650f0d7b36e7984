"""
PDF Form - Extract and fill PDF form fields.

This library reads the interactive form (AcroForm) of a PDF held in memory,
describes every field uniformly, and fills text fields before flattening
the form into static page content.

Quick Start:
    >>> from pdf_form import PDFFormDocument, describe_fields
    >>> with PDFFormDocument.load(pdf_bytes) as document:
    ...     result = describe_fields(document.get_form())

Main Classes:
    - PDFFormDocument: Load, inspect and serialize a PDF
    - PDFForm: Ordered view over the document's form fields
    - PDFFormProcessor: Run extract/map operations over pipeline items

Exceptions:
    - PDFFormException: Base exception
    - MissingBinaryCollectionError: Item has no binary attachments
    - MissingBinaryPropertyError: Named attachment is missing
    - MalformedDocumentError: Bytes are not a readable PDF
    - NoFormError: Document has no interactive form

For CLI usage, use the 'pdf-form' command after installation.
"""

__version__ = "1.0.0"
__author__ = "PDF Form Contributors"
__license__ = "MIT"

# Core classes
from pdf_form.document import PDFFormDocument
from pdf_form.fields import FormField, PDFForm
from pdf_form.pipeline import PDFFormProcessor, process_items

# Field operations
from pdf_form.classifier import classify, describe_fields, read_value
from pdf_form.writer import apply_assignments, flatten

# Data types
from pdf_form.types import (
    ExtractionResult,
    FieldAssignment,
    FieldInfo,
    FieldKind,
    MappingResult,
    Operation,
    PipelineItem,
    ReadResult,
)

# Exceptions
from pdf_form.exceptions import (
    PDFFormException,
    MissingBinaryCollectionError,
    MissingBinaryPropertyError,
    MalformedDocumentError,
    NoFormError,
    UnsupportedOperationError,
)

__all__ = [
    # Main classes
    "PDFFormDocument",
    "PDFForm",
    "FormField",
    "PDFFormProcessor",
    "process_items",
    # Field operations
    "classify",
    "describe_fields",
    "read_value",
    "apply_assignments",
    "flatten",
    # Data types
    "ExtractionResult",
    "FieldAssignment",
    "FieldInfo",
    "FieldKind",
    "MappingResult",
    "Operation",
    "PipelineItem",
    "ReadResult",
    # Exceptions
    "PDFFormException",
    "MissingBinaryCollectionError",
    "MissingBinaryPropertyError",
    "MalformedDocumentError",
    "NoFormError",
    "UnsupportedOperationError",
    # Version info
    "__version__",
]
