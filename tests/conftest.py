"""
Shared fixtures.

No test talks to a real backend: storage is in memory, extraction is the
seeded mock, and the auth client is a small fake with the same call shapes
as supabase.Client.auth.
"""

import random
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.models.invoice import Invoice, InvoiceStatus, UploadedDocument, UserProfile
from expense_tracker.notifications import ToastCenter
from expense_tracker.services.extraction import MockDocumentExtractor
from expense_tracker.services.invoice_service import InvoiceService
from expense_tracker.services.storage import InMemoryInvoiceRepository


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSubscription:
    def __init__(self):
        self.unsubscribed = False

    def unsubscribe(self):
        self.unsubscribed = True


class FakeAuthClient:
    """Records calls and answers like supabase's GoTrue client."""

    def __init__(self, accounts: Optional[dict] = None, confirm_email: bool = False):
        self.accounts = dict(accounts or {})
        self.confirm_email = confirm_email
        self.session = None
        self.callbacks = []
        self.subscription = FakeSubscription()
        self.sign_out_error: Optional[Exception] = None
        self.sign_up_calls = []

    @staticmethod
    def make_user(user_id: str, email: str, full_name: str = ""):
        metadata = {"full_name": full_name} if full_name else {}
        return SimpleNamespace(id=user_id, email=email, user_metadata=metadata)

    def get_session(self):
        return self.session

    def on_auth_state_change(self, callback):
        self.callbacks.append(callback)
        return self.subscription

    def emit(self, event: str, session) -> None:
        self.session = session
        for callback in self.callbacks:
            callback(event, session)

    def sign_in_with_password(self, credentials):
        account = self.accounts.get(credentials["email"])
        if account is None or account["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        user = account["user"]
        self.session = SimpleNamespace(user=user)
        return SimpleNamespace(user=user, session=self.session)

    def sign_up(self, credentials):
        self.sign_up_calls.append(credentials)
        if credentials["email"] in self.accounts:
            raise Exception("User already registered")
        full_name = credentials.get("options", {}).get("data", {}).get("full_name", "")
        user = self.make_user(f"user-{len(self.accounts) + 1}", credentials["email"], full_name)
        self.accounts[credentials["email"]] = {"password": credentials["password"], "user": user}
        if self.confirm_email:
            return SimpleNamespace(user=user, session=None)
        self.session = SimpleNamespace(user=user)
        return SimpleNamespace(user=user, session=self.session)

    def sign_out(self):
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.session = None


def make_invoice(
    invoice_id: str,
    user_id: str = "user-1",
    vendor_name: str = "Amazon",
    amount: str = "100",
    status: InvoiceStatus = InvoiceStatus.PENDING,
    created_at: Optional[datetime] = None,
) -> Invoice:
    return Invoice(
        id=invoice_id,
        user_id=user_id,
        vendor_name=vendor_name,
        amount=Decimal(amount),
        invoice_date=date(2024, 5, 1),
        status=status,
        created_at=created_at or datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def user() -> UserProfile:
    return UserProfile(id="user-1", email="ada@example.com", full_name="Ada Lovelace")


@pytest.fixture
def other_user() -> UserProfile:
    return UserProfile(id="user-2", email="grace@example.com")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def toasts(clock) -> ToastCenter:
    return ToastCenter(duration_seconds=5.0, clock=clock)


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger()


@pytest.fixture
def repository() -> InMemoryInvoiceRepository:
    # Strictly increasing timestamps so recency order is deterministic
    start = datetime(2024, 5, 1, tzinfo=timezone.utc)
    ticks = iter(range(1, 10_000))
    return InMemoryInvoiceRepository(clock=lambda: start + timedelta(seconds=next(ticks)))


@pytest.fixture
def extractor() -> MockDocumentExtractor:
    return MockDocumentExtractor(
        delay_seconds=0,
        rng=random.Random(42),
        today=lambda: date(2024, 5, 20),
    )


@pytest.fixture
def service(repository, extractor, audit_logger) -> InvoiceService:
    return InvoiceService(repository, extractor, audit_logger)


@pytest.fixture
def document() -> UploadedDocument:
    content = b"not really an image"
    return UploadedDocument(
        filename="receipt.png",
        mime_type="image/png",
        content=content,
        size_bytes=len(content),
    )


@pytest.fixture
def auth_client() -> FakeAuthClient:
    ada = FakeAuthClient.make_user("user-1", "ada@example.com", "Ada Lovelace")
    return FakeAuthClient(accounts={"ada@example.com": {"password": "secret", "user": ada}})


@pytest.fixture
def invoice_factory():
    return make_invoice
