"""Document extraction package."""

from expense_tracker.services.extraction.interface import (
    DocumentExtractor,
    ExtractionError,
    ExtractionServiceError,
    LowConfidenceExtractionError,
    MalformedDocumentError,
)
from expense_tracker.services.extraction.mindee_service import MindeeDocumentExtractor
from expense_tracker.services.extraction.mock import MOCK_VENDORS, MockDocumentExtractor

__all__ = [
    "DocumentExtractor",
    "ExtractionError",
    "ExtractionServiceError",
    "LowConfidenceExtractionError",
    "MalformedDocumentError",
    "MindeeDocumentExtractor",
    "MockDocumentExtractor",
    "MOCK_VENDORS",
]
