"""
Document Extraction using Mindee

Mindee's invoice API is specialized for financial documents, returns
STRUCTURED fields rather than raw text, and reports a confidence per field.

This service handles:
1. Checking the upload is a readable image (Pillow)
2. Sending it to Mindee
3. Converting the prediction to ExtractedInvoiceData

Failure kinds are kept distinct so the UI and logs can tell them apart:
- MalformedDocumentError: the bytes are not an image
- LowConfidenceExtractionError: vendor, amount or date missing or unreliable
- ExtractionServiceError: Mindee could not be reached or answered with an error

Only ExtractionServiceError is retried.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from io import BytesIO
from typing import Any, Optional

import structlog
from mindee import Client
from mindee.product import InvoiceV4
from PIL import Image
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.models.invoice import ExtractedInvoiceData, UploadedDocument
from expense_tracker.services.extraction.interface import (
    DocumentExtractor,
    ExtractionServiceError,
    LowConfidenceExtractionError,
    MalformedDocumentError,
)


logger = structlog.get_logger(__name__)


class MindeeDocumentExtractor(DocumentExtractor):
    """
    Extractor backed by Mindee's InvoiceV4 product.

    IMPORTANT BOUNDARIES:
    1. This service ONLY proposes fields; the user confirms them
    2. Missing key fields are an error, never filled with defaults
    """

    name = "mindee"

    def __init__(
        self,
        api_key: Optional[str] = None,
        min_confidence: float = 0.5,
        client: Optional[Any] = None,
        max_attempts: int = 3,
        wait=None,
    ):
        """
        Args:
            api_key: Mindee API key (ignored when `client` is given)
            min_confidence: Average field confidence required to accept a result
            client: Pre-built Mindee client
            max_attempts: Attempts for service errors
            wait: tenacity wait strategy between attempts
        """
        self._api_key = api_key
        self._client = client
        self._min_confidence = min_confidence
        self._max_attempts = max_attempts
        self._wait = wait or wait_exponential(multiplier=1, min=2, max=10)

    def _get_client(self) -> Any:
        """Get or create Mindee client."""
        if self._client is None:
            self._client = Client(api_key=self._api_key)
        return self._client

    @staticmethod
    def _safe_decimal(value) -> Optional[Decimal]:
        """Safely convert a value to Decimal."""
        if value is None:
            return None
        try:
            return Decimal(str(value)).quantize(Decimal("0.01"))
        except (InvalidOperation, TypeError, ValueError):
            return None

    @staticmethod
    def _safe_date(value) -> Optional[date]:
        """Safely convert a value to date."""
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            for fmt in ["%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y", "%Y/%m/%d"]:
                try:
                    return datetime.strptime(value, fmt).date()
                except ValueError:
                    continue
        return None

    @staticmethod
    def _check_image(document: UploadedDocument) -> None:
        """Raise MalformedDocumentError unless the bytes decode as an image."""
        if not document.content:
            raise MalformedDocumentError(f"{document.filename} is empty")
        try:
            with Image.open(BytesIO(document.content)) as img:
                img.verify()
        except Exception as e:
            raise MalformedDocumentError(
                f"{document.filename} is not a readable image: {e}"
            ) from e

    def _predict(self, document: UploadedDocument) -> Any:
        client = self._get_client()
        try:
            input_source = client.source_from_bytes(document.content, document.filename)
            response = client.parse(InvoiceV4, input_source)
            return response.document.inference.prediction
        except Exception as e:
            raise ExtractionServiceError(f"Mindee request failed: {e}") from e

    async def extract(self, document: UploadedDocument) -> ExtractedInvoiceData:
        """
        Extract invoice fields using Mindee.

        Raises:
            MalformedDocumentError: If the upload is not an image
            LowConfidenceExtractionError: If key fields are missing or unreliable
            ExtractionServiceError: If Mindee fails on every attempt
        """
        self._check_image(document)

        prediction = None
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(ExtractionServiceError),
            stop=stop_after_attempt(self._max_attempts),
            wait=self._wait,
            reraise=True,
        ):
            with attempt:
                prediction = self._predict(document)

        return self._to_extracted_data(prediction)

    def _to_extracted_data(self, prediction: Any) -> ExtractedInvoiceData:
        supplier = getattr(prediction, "supplier_name", None)
        total = getattr(prediction, "total_amount", None)
        invoice_date = getattr(prediction, "date", None)

        vendor_name = getattr(supplier, "value", None)
        amount = self._safe_decimal(getattr(total, "value", None))
        parsed_date = self._safe_date(getattr(invoice_date, "value", None))

        confidences = [
            field.confidence
            for field, value in ((supplier, vendor_name), (total, amount), (invoice_date, parsed_date))
            if value is not None and getattr(field, "confidence", None) is not None
        ]
        overall_confidence = sum(confidences) / len(confidences) if confidences else 0.0

        missing = [
            name
            for name, value in (("vendor", vendor_name), ("amount", amount), ("date", parsed_date))
            if value is None
        ]
        if missing:
            raise LowConfidenceExtractionError(
                overall_confidence,
                f"Could not read {', '.join(missing)} from this invoice. "
                "Please upload a clearer photo.",
            )

        if overall_confidence < self._min_confidence:
            raise LowConfidenceExtractionError(
                overall_confidence,
                f"Extraction confidence ({overall_confidence:.0%}) is too low. "
                "Please upload a clearer photo.",
            )

        logger.debug("mindee_prediction_accepted", confidence=overall_confidence)
        return ExtractedInvoiceData(
            vendor_name=str(vendor_name)[:200],
            amount=amount,
            invoice_date=parsed_date,
            confidence=min(max(overall_confidence, 0.0), 1.0),
        )
