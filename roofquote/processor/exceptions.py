class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentNotFoundError(ProcessorError):
    """Raised when a document cannot be found for the organization."""


class DocumentAlreadyProcessingError(ProcessorError):
    """Raised when a document is claimed while another run holds it."""
