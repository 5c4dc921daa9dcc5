"""
Document Extraction Interface

An extractor turns an uploaded invoice image into PROPOSED fields
(vendor, amount, date). The user always reviews the proposal before
anything is saved.

Real extractors must fail loudly with one of the ExtractionError
subclasses below. They must never fall back to made-up data.
"""

from abc import ABC, abstractmethod

from expense_tracker.models.invoice import ExtractedInvoiceData, UploadedDocument


class DocumentExtractor(ABC):
    """Capability interface for invoice field extraction."""

    #: Short name used in logs and the settings page
    name: str = "extractor"

    @abstractmethod
    async def extract(self, document: UploadedDocument) -> ExtractedInvoiceData:
        """
        Extract invoice fields from a document.

        Raises:
            ExtractionError: If no usable proposal could be produced
        """
        pass


class ExtractionError(Exception):
    """Base exception for extraction errors."""
    pass


class MalformedDocumentError(ExtractionError):
    """The uploaded bytes are not a readable image."""
    pass


class LowConfidenceExtractionError(ExtractionError):
    """The extractor could not read the key fields with enough confidence."""

    def __init__(self, confidence: float, message: str):
        self.confidence = confidence
        super().__init__(message)


class ExtractionServiceError(ExtractionError):
    """The extraction service could not be reached or returned an error."""
    pass
