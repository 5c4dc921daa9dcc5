"""Tests for the invoice repositories (in-memory and Supabase)."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from expense_tracker.models.invoice import NewInvoice
from expense_tracker.services.storage import (
    BackendNotConfiguredError,
    DataAccessError,
    InMemoryInvoiceRepository,
    NotFoundError,
    SupabaseInvoiceRepository,
)


def _record(user_id="user-1", vendor="Amazon", amount="100"):
    return NewInvoice(
        user_id=user_id,
        vendor_name=vendor,
        amount=Decimal(amount),
        invoice_date=date(2024, 5, 1),
    )


def _row(row_id=1, user_id="user-1", vendor="Amazon", amount=100):
    return {
        "id": row_id,
        "user_id": user_id,
        "vendor_name": vendor,
        "amount": amount,
        "invoice_date": "2024-05-01",
        "status": "pending",
        "image_url": None,
        "created_at": "2024-05-01T10:00:00+00:00",
    }


def _client_returning(data=None, error=None):
    """A MagicMock supabase client whose query chain ends in execute()."""
    client = MagicMock()
    table = client.table.return_value
    chain = table.select.return_value.eq.return_value.order.return_value
    for terminal in (
        chain,
        table.insert.return_value,
        table.delete.return_value.eq.return_value,
    ):
        if error is not None:
            terminal.execute.side_effect = error
        else:
            terminal.execute.return_value = SimpleNamespace(data=data)
    return client


class TestInMemoryRepository:
    """Tests for the in-memory stand-in."""

    @pytest.mark.asyncio
    async def test_insert_assigns_identity(self, repository):
        stored = await repository.insert(_record())
        assert stored.id
        assert stored.created_at is not None
        assert len(repository) == 1

    @pytest.mark.asyncio
    async def test_list_is_owner_scoped_and_newest_first(self, repository):
        first = await repository.insert(_record(vendor="Amazon"))
        await repository.insert(_record(user_id="user-2", vendor="Stripe"))
        second = await repository.insert(_record(vendor="Figma"))

        listed = await repository.list_for_user("user-1")
        assert [invoice.id for invoice in listed] == [second.id, first.id]
        assert all(invoice.user_id == "user-1" for invoice in listed)

    @pytest.mark.asyncio
    async def test_same_timestamp_keeps_insertion_order(self, invoice_factory):
        repo = InMemoryInvoiceRepository([
            invoice_factory("a"),
            invoice_factory("b"),
        ])
        listed = await repo.list_for_user("user-1")
        assert [invoice.id for invoice in listed] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, repository):
        with pytest.raises(NotFoundError):
            await repository.delete("does-not-exist")


class TestSupabaseRepository:
    """Tests for the Supabase repository against a mocked client."""

    @pytest.mark.asyncio
    async def test_list_filters_by_owner_and_orders_newest_first(self):
        client = _client_returning(data=[_row(2), _row(1)])
        repo = SupabaseInvoiceRepository(client, table_name="invoices")

        invoices = await repo.list_for_user("user-1")

        client.table.assert_called_once_with("invoices")
        table = client.table.return_value
        table.select.assert_called_once_with("*")
        table.select.return_value.eq.assert_called_once_with("user_id", "user-1")
        table.select.return_value.eq.return_value.order.assert_called_once_with(
            "created_at", desc=True
        )
        assert [invoice.id for invoice in invoices] == ["2", "1"]

    @pytest.mark.asyncio
    async def test_list_empty(self):
        repo = SupabaseInvoiceRepository(_client_returning(data=[]))
        assert await repo.list_for_user("user-1") == []

    @pytest.mark.asyncio
    async def test_insert_sends_json_row_and_returns_stored(self):
        client = _client_returning(data=[_row(7, amount=120.5)])
        repo = SupabaseInvoiceRepository(client)

        stored = await repo.insert(_record(amount="120.50"))

        sent = client.table.return_value.insert.call_args.args[0]
        assert sent == [_record(amount="120.50").to_row()]
        assert stored.id == "7"
        assert stored.amount == Decimal("120.5")

    @pytest.mark.asyncio
    async def test_insert_without_returned_row_fails(self):
        repo = SupabaseInvoiceRepository(_client_returning(data=[]))
        with pytest.raises(DataAccessError):
            await repo.insert(_record())

    @pytest.mark.asyncio
    async def test_delete_filters_by_id(self):
        client = _client_returning(data=[_row(3)])
        repo = SupabaseInvoiceRepository(client)

        await repo.delete("3")

        client.table.return_value.delete.return_value.eq.assert_called_once_with("id", "3")

    @pytest.mark.asyncio
    async def test_delete_nothing_matched_is_not_found(self):
        repo = SupabaseInvoiceRepository(_client_returning(data=[]))
        with pytest.raises(NotFoundError):
            await repo.delete("404")

    @pytest.mark.asyncio
    async def test_backend_errors_are_wrapped(self):
        repo = SupabaseInvoiceRepository(_client_returning(error=RuntimeError("connection reset")))

        with pytest.raises(DataAccessError, match="connection reset"):
            await repo.list_for_user("user-1")
        with pytest.raises(DataAccessError, match="connection reset"):
            await repo.insert(_record())
        with pytest.raises(DataAccessError, match="connection reset"):
            await repo.delete("1")

    @pytest.mark.asyncio
    async def test_missing_client_is_not_configured(self):
        repo = SupabaseInvoiceRepository(None)
        with pytest.raises(BackendNotConfiguredError):
            await repo.list_for_user("user-1")
