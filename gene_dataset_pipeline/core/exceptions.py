#!/usr/bin/env python3

"""
Custom exceptions for the gene dataset pipeline.

Provides specific exception types for better error handling and debugging.
"""

class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""
    pass


class ParseError(PipelineError):
    """Error occurred during file parsing."""

    def __init__(self, message: str, filename: str = "", line_number: int = 0):
        super().__init__(message)
        self.filename = filename
        self.line_number = line_number

    def __str__(self):
        if self.filename and self.line_number:
            return f"Parse error in {self.filename} at line {self.line_number}: {super().__str__()}"
        elif self.filename:
            return f"Parse error in {self.filename}: {super().__str__()}"
        return super().__str__()


class ConfigurationError(PipelineError):
    """Error in pipeline configuration."""
    pass


class OptionParseError(PipelineError):
    """Option string could not be interpreted."""

    def __init__(self, message: str, params: str = ""):
        super().__init__(message)
        self.params = params

    def __str__(self):
        if self.params:
            return f"Invalid options '{self.params}': {super().__str__()}"
        return super().__str__()


class OperationCancelled(PipelineError):
    """Option collection was cancelled by the user."""
    pass


class CapabilityError(PipelineError):
    """Operation does not support the kind of data in the dataset."""

    def __init__(self, message: str, operation: str = "", code_type: str = ""):
        super().__init__(message)
        self.operation = operation
        self.code_type = code_type

    def __str__(self):
        if self.operation and self.code_type:
            return f"{self.operation} cannot handle '{self.code_type}' data: {super().__str__()}"
        return super().__str__()


class ExportError(PipelineError):
    """Error writing a dataset to its destination."""

    def __init__(self, message: str, destination: str = ""):
        super().__init__(message)
        self.destination = destination

    def __str__(self):
        if self.destination:
            return f"Export to {self.destination} failed: {super().__str__()}"
        return super().__str__()


class MemoryLimitError(PipelineError):
    """Memory usage exceeded limits."""

    def __init__(self, message: str, current_usage: float, limit: float):
        super().__init__(message)
        self.current_usage = current_usage
        self.limit = limit

    def __str__(self):
        return f"Memory error: {super().__str__()} (current: {self.current_usage:.1f}MB, limit: {self.limit:.1f}MB)"
