"""
Custom exceptions for PDF Form.

This module defines all custom exceptions used throughout the library.
Item-fatal errors derive from :class:`PDFFormException`; the field-level
errors below :class:`FieldError` are raised while reading or writing a
single field and are never surfaced to callers of the pipeline.
"""


class PDFFormException(Exception):
    """Base exception for all PDF Form errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF form error occurred."


class MissingBinaryCollectionError(PDFFormException):
    """Raised when an item carries no binary attachments at all."""

    @property
    def default_message(self) -> str:
        return "No binary data exists on item!"


class MissingBinaryPropertyError(PDFFormException):
    """Raised when the named binary property is absent from an item."""

    def __init__(self, property_name: str = "", message: str = "") -> None:
        self.property_name = property_name
        if not message and property_name:
            message = f'No binary data property "{property_name}" exists on item!'
        super().__init__(message)

    @property
    def default_message(self) -> str:
        return "The requested binary data property does not exist on item!"


class MalformedDocumentError(PDFFormException):
    """Raised when bytes cannot be parsed as a PDF document."""

    @property
    def default_message(self) -> str:
        return "Invalid, corrupted or encrypted PDF document."


class NoFormError(PDFFormException):
    """Raised when a document has no interactive form dictionary."""

    @property
    def default_message(self) -> str:
        return "PDF document does not contain an interactive form."


class UnsupportedOperationError(PDFFormException):
    """Raised when the requested operation is not known."""

    @property
    def default_message(self) -> str:
        return "Unsupported PDF form operation."


class FieldError(PDFFormException):
    """Base class for failures scoped to a single form field."""

    def __init__(self, field_name: str = "", message: str = "") -> None:
        self.field_name = field_name
        super().__init__(message)

    @property
    def default_message(self) -> str:
        return "Form field operation failed."


class FieldReadError(FieldError):
    """Raised when a field value cannot be read."""

    @property
    def default_message(self) -> str:
        return "Unable to read form field value."


class FieldTypeError(FieldError):
    """Raised when a field does not support the requested write."""

    @property
    def default_message(self) -> str:
        return "Form field does not accept text values."


class FieldValueError(FieldError):
    """Raised when a value is rejected by the field's constraints."""

    @property
    def default_message(self) -> str:
        return "Value is not valid for this form field."
