"""Simulated extraction: stands in for a real document-understanding call."""

import asyncio
import random
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Sequence

from expense_tracker.models.invoice import ExtractedInvoiceData, UploadedDocument
from expense_tracker.services.extraction.interface import DocumentExtractor


MOCK_VENDORS = ("Amazon", "Google Cloud", "WeWork", "Stripe", "Figma")
MIN_MOCK_AMOUNT = Decimal("50")
MAX_MOCK_AMOUNT = Decimal("550")


class MockDocumentExtractor(DocumentExtractor):
    """
    Waits a fixed delay, then proposes a random vendor, amount and today's date.

    Never fails. The document content is not inspected.
    """

    name = "mock"

    def __init__(
        self,
        delay_seconds: float = 2.0,
        vendors: Sequence[str] = MOCK_VENDORS,
        rng: Optional[random.Random] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self._delay_seconds = delay_seconds
        self._vendors = tuple(vendors)
        self._rng = rng or random.Random()
        self._today = today or date.today

    async def extract(self, document: UploadedDocument) -> ExtractedInvoiceData:
        await asyncio.sleep(self._delay_seconds)

        amount = Decimal(str(self._rng.uniform(float(MIN_MOCK_AMOUNT), float(MAX_MOCK_AMOUNT))))
        return ExtractedInvoiceData(
            vendor_name=self._rng.choice(self._vendors),
            amount=amount.quantize(Decimal("0.01")),
            invoice_date=self._today(),
        )
