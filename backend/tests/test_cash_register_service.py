"""
Cash register session tests: opening carry-over, balance and closing.
"""
from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.models.cash_register import CashMovementType, CashRegisterStatus, PaymentKind
from app.schemas.cash_register import CashMovementCreate, CashRegisterClose, CashRegisterOpen
from app.services.cash_register_service import CashRegisterService, compute_balance
from app.services.errors import ConflictError, NotFoundError, ValidationError


def _movement(type_: CashMovementType, amount: str, method: PaymentKind = PaymentKind.CASH) -> SimpleNamespace:
    return SimpleNamespace(type=type_.value, amount=Decimal(amount), payment_method=method.value)


def test_compute_balance_counts_only_cash_in_drawer() -> None:
    movements = [
        _movement(CashMovementType.OPENING, "100"),
        _movement(CashMovementType.SALE, "50"),
        _movement(CashMovementType.SALE, "80", PaymentKind.PIX),
        _movement(CashMovementType.SALE, "20", PaymentKind.CREDIT),
        _movement(CashMovementType.DEPOSIT, "30"),
        _movement(CashMovementType.WITHDRAWAL, "40"),
    ]

    balance = compute_balance(Decimal("100"), movements)
    summary = balance.as_dict(cash_register_id=None)

    assert balance.expected_cash == Decimal("140")
    assert balance.total_sales == Decimal("150")
    assert summary["balance"]["pix"] == Decimal("80")
    assert summary["balance"]["credit"] == Decimal("20")
    assert summary["balance"]["debit"] == Decimal("0")
    assert summary["balance"]["total"] == Decimal("240")


@pytest.mark.asyncio
async def test_open_register_once_per_operator(db_session, tenant) -> None:
    service = CashRegisterService(db_session)

    register = await service.open_register(tenant.manager.id, CashRegisterOpen(opening_amount=Decimal("100")))
    with pytest.raises(ConflictError) as exc_info:
        await service.open_register(tenant.manager.id, CashRegisterOpen(opening_amount=Decimal("10")))

    assert register.status == CashRegisterStatus.OPEN.value
    assert register.opening_amount == Decimal("100")
    assert [m.type for m in register.movements] == [CashMovementType.OPENING.value]
    assert exc_info.value.code == "cash_register_conflict"


@pytest.mark.asyncio
async def test_register_lifecycle_carries_closing_amount(db_session, tenant) -> None:
    service = CashRegisterService(db_session)
    user_id = tenant.manager.id
    register = await service.open_register(user_id, CashRegisterOpen(opening_amount=Decimal("100")))
    await service.add_movement(user_id, CashMovementCreate(type=CashMovementType.SALE, amount=Decimal("60")))
    await service.add_movement(
        user_id,
        CashMovementCreate(type=CashMovementType.SALE, amount=Decimal("45"), payment_method=PaymentKind.PIX),
    )

    balance = await service.expected_balance(user_id)
    assert balance["expected_amount"] == Decimal("160")
    assert balance["balance"]["total"] == Decimal("205")

    closed = await service.close_register(
        user_id,
        register.id,
        CashRegisterClose(withdraw_amount=Decimal("150"), notes="Sangria final"),
    )
    assert closed.status == CashRegisterStatus.CLOSED.value
    assert closed.closing_amount == Decimal("10")
    assert closed.expected_amount == Decimal("160")
    assert closed.closed_by == user_id

    reopened = await service.open_register(user_id, CashRegisterOpen(opening_amount=Decimal("20")))
    assert reopened.opening_amount == Decimal("30")


@pytest.mark.asyncio
async def test_withdrawal_cannot_exceed_cash_in_drawer(db_session, tenant) -> None:
    service = CashRegisterService(db_session)
    user_id = tenant.manager.id
    register = await service.open_register(user_id, CashRegisterOpen(opening_amount=Decimal("50")))

    with pytest.raises(ValidationError) as exc_info:
        await service.add_movement(
            user_id,
            CashMovementCreate(type=CashMovementType.WITHDRAWAL, amount=Decimal("80")),
        )
    assert exc_info.value.code == "invalid_withdraw_amount"

    with pytest.raises(ValidationError):
        await service.close_register(user_id, register.id, CashRegisterClose(withdraw_amount=Decimal("51")))


@pytest.mark.asyncio
async def test_movement_needs_open_register_and_valid_type(db_session, tenant) -> None:
    service = CashRegisterService(db_session)

    with pytest.raises(NotFoundError) as exc_info:
        await service.add_movement(
            tenant.manager.id,
            CashMovementCreate(type=CashMovementType.SALE, amount=Decimal("10")),
        )
    assert exc_info.value.code == "cash_register_not_found"

    with pytest.raises(ValidationError):
        await service.add_movement(
            tenant.manager.id,
            CashMovementCreate(type=CashMovementType.OPENING, amount=Decimal("10")),
        )


@pytest.mark.asyncio
async def test_register_of_another_operator_is_not_visible(db_session, tenant) -> None:
    service = CashRegisterService(db_session)
    register = await service.open_register(tenant.manager.id, CashRegisterOpen(opening_amount=Decimal("10")))

    with pytest.raises(NotFoundError):
        await service.get_register(tenant.admin.id, register.id)
    with pytest.raises(NotFoundError):
        await service.close_register(tenant.admin.id, register.id, CashRegisterClose(withdraw_amount=Decimal("0")))

    assert await service.list_registers(tenant.admin.id) == []
