"""
CashRegisterService — cash register sessions of a branch operator.

A register opens with the cash left by the operator's previous closing plus
the informed amount, accumulates movements, and closes by withdrawing part
of the expected cash.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.models.cash_register import (
    CashMovement,
    CashMovementType,
    CashRegister,
    CashRegisterStatus,
    PaymentKind,
)
from app.schemas.cash_register import CashMovementCreate, CashRegisterClose, CashRegisterOpen
from app.services.branch_scope import BranchScopedService
from app.services.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class RegisterBalance:
    """Running totals of an open register."""

    opening_amount: Decimal
    expected_cash: Decimal
    total_sales: Decimal = ZERO
    total_deposits: Decimal = ZERO
    total_withdrawals: Decimal = ZERO
    sales_by_method: dict[str, Decimal] = field(default_factory=dict)

    @property
    def total(self) -> Decimal:
        non_cash = sum(
            (amount for method, amount in self.sales_by_method.items() if method != PaymentKind.CASH.value),
            ZERO,
        )
        return self.expected_cash + non_cash

    def as_dict(self, cash_register_id: UUID) -> dict:
        by_method = {kind: self.sales_by_method.get(kind.value, ZERO) for kind in PaymentKind}
        return {
            "cash_register_id": cash_register_id,
            "opening_amount": self.opening_amount,
            "expected_amount": self.expected_cash,
            "total_sales": self.total_sales,
            "total_deposits": self.total_deposits,
            "total_withdrawals": self.total_withdrawals,
            "balance": {
                "cash": self.expected_cash,
                "credit": by_method[PaymentKind.CREDIT],
                "debit": by_method[PaymentKind.DEBIT],
                "pix": by_method[PaymentKind.PIX],
                "online": by_method[PaymentKind.ONLINE],
                "total": self.total,
            },
        }


def compute_balance(opening_amount: Decimal, movements: Iterable[CashMovement]) -> RegisterBalance:
    """
    Fold movements into the register balance.

    Only cash sales change the expected cash; the OPENING movement is
    already part of ``opening_amount``.
    """
    balance = RegisterBalance(
        opening_amount=Decimal(opening_amount),
        expected_cash=Decimal(opening_amount),
    )
    for movement in movements:
        amount = Decimal(movement.amount)
        if movement.type == CashMovementType.SALE.value:
            method = (movement.payment_method or "").upper()
            balance.total_sales += amount
            balance.sales_by_method[method] = balance.sales_by_method.get(method, ZERO) + amount
            if method == PaymentKind.CASH.value:
                balance.expected_cash += amount
        elif movement.type == CashMovementType.DEPOSIT.value:
            balance.total_deposits += amount
            balance.expected_cash += amount
        elif movement.type == CashMovementType.WITHDRAWAL.value:
            balance.total_withdrawals += amount
            balance.expected_cash -= amount
    return balance


class CashRegisterService(BranchScopedService):

    async def open_register(self, user_id: UUID, payload: CashRegisterOpen) -> CashRegister:
        branch_id = await self._branch_id(user_id)
        if await self._find_open(branch_id, user_id) is not None:
            raise ConflictError("Você já possui um caixa aberto", code="cash_register_conflict")

        last_closed_stmt = (
            select(CashRegister.closing_amount)
            .where(
                CashRegister.branch_id == branch_id,
                CashRegister.opened_by == user_id,
                CashRegister.status == CashRegisterStatus.CLOSED.value,
            )
            .order_by(CashRegister.closing_date.desc())
            .limit(1)
        )
        previous_balance = (await self._db.execute(last_closed_stmt)).scalar_one_or_none() or ZERO

        register = CashRegister(
            branch_id=branch_id,
            opened_by=user_id,
            status=CashRegisterStatus.OPEN.value,
            opening_amount=previous_balance + payload.opening_amount,
            expected_amount=previous_balance,
            opening_date=datetime.utcnow(),
            notes=payload.notes,
        )
        self._db.add(register)
        await self._db.flush()
        self._db.add(
            CashMovement(
                cash_register_id=register.id,
                user_id=user_id,
                type=CashMovementType.OPENING.value,
                amount=payload.opening_amount,
                payment_method=PaymentKind.CASH.value,
                description=payload.notes or "Abertura de caixa",
            )
        )
        await self._db.flush()
        logger.info("Caixa aberto: filial=%s usuario=%s valor=%s", branch_id, user_id, register.opening_amount)
        return await self._get_register(branch_id, user_id, register.id)

    async def list_registers(self, user_id: UUID) -> list[CashRegister]:
        branch_id = await self._branch_id(user_id)
        stmt = (
            select(CashRegister)
            .options(selectinload(CashRegister.movements))
            .where(CashRegister.branch_id == branch_id, CashRegister.opened_by == user_id)
            .order_by(CashRegister.opening_date.desc())
        )
        return list((await self._db.execute(stmt)).scalars().all())

    async def get_register(self, user_id: UUID, register_id: UUID) -> CashRegister:
        branch_id = await self._branch_id(user_id)
        return await self._get_register(branch_id, user_id, register_id)

    async def add_movement(self, user_id: UUID, payload: CashMovementCreate) -> CashMovement:
        """Record a sale, deposit or withdrawal on the caller's open register."""
        if payload.type == CashMovementType.OPENING:
            raise ValidationError("Tipo de movimentação inválido", code="invalid_movement_type")
        branch_id = await self._branch_id(user_id)
        register = await self._find_open(branch_id, user_id)
        if register is None:
            raise NotFoundError("Nenhum caixa aberto encontrado", code="cash_register_not_found")

        if payload.type == CashMovementType.WITHDRAWAL:
            balance = compute_balance(register.opening_amount, register.movements)
            if payload.amount > balance.expected_cash:
                raise ValidationError(
                    f"Não é possível retirar {payload.amount}. "
                    f"Valor disponível em caixa: {balance.expected_cash}",
                    code="invalid_withdraw_amount",
                )

        movement = CashMovement(
            cash_register_id=register.id,
            user_id=user_id,
            order_id=payload.order_id,
            type=payload.type.value,
            amount=payload.amount,
            payment_method=payload.payment_method.value,
            description=payload.description,
        )
        self._db.add(movement)
        await self._db.flush()
        return movement

    async def expected_balance(self, user_id: UUID) -> dict:
        branch_id = await self._branch_id(user_id)
        register = await self._find_open(branch_id, user_id)
        if register is None:
            raise NotFoundError("Nenhum caixa aberto encontrado", code="cash_register_not_found")
        return compute_balance(register.opening_amount, register.movements).as_dict(register.id)

    async def close_register(
        self,
        user_id: UUID,
        register_id: UUID,
        payload: CashRegisterClose,
    ) -> CashRegister:
        """
        Close the caller's open register, withdrawing ``withdraw_amount``.

        What stays in the drawer becomes the ``closing_amount`` carried into
        the operator's next opening.
        """
        branch_id = await self._branch_id(user_id)
        register = await self._find_open(branch_id, user_id, register_id=register_id)
        if register is None:
            raise NotFoundError("Caixa aberto não encontrado", code="cash_register_not_found")

        expected = compute_balance(register.opening_amount, register.movements).expected_cash
        withdraw = payload.withdraw_amount
        if withdraw > expected:
            raise ValidationError(
                f"Não é possível retirar {withdraw}. Valor disponível em caixa: {expected}",
                code="invalid_withdraw_amount",
            )

        closing_amount = expected - withdraw
        register.status = CashRegisterStatus.CLOSED.value
        register.closing_date = datetime.utcnow()
        register.closed_by = user_id
        register.closing_amount = closing_amount
        register.expected_amount = expected
        register.difference = closing_amount - expected
        register.notes = payload.notes
        self._db.add(
            CashMovement(
                cash_register_id=register.id,
                user_id=user_id,
                type=CashMovementType.WITHDRAWAL.value,
                amount=withdraw,
                payment_method=PaymentKind.CASH.value,
                description=payload.notes or "Retirada no fechamento de caixa",
            )
        )
        await self._db.flush()
        logger.info("Caixa fechado: id=%s esperado=%s retirado=%s", register.id, expected, withdraw)
        return await self._get_register(branch_id, user_id, register.id)

    async def _find_open(
        self,
        branch_id: UUID,
        user_id: UUID,
        register_id: Optional[UUID] = None,
    ) -> Optional[CashRegister]:
        stmt = (
            select(CashRegister)
            .options(selectinload(CashRegister.movements))
            .where(
                CashRegister.branch_id == branch_id,
                CashRegister.opened_by == user_id,
                CashRegister.status == CashRegisterStatus.OPEN.value,
            )
        )
        stmt = stmt.execution_options(populate_existing=True)
        if register_id is not None:
            stmt = stmt.where(CashRegister.id == register_id)
        return (await self._db.execute(stmt)).scalars().first()

    async def _get_register(self, branch_id: UUID, user_id: UUID, register_id: UUID) -> CashRegister:
        stmt = (
            select(CashRegister)
            .options(selectinload(CashRegister.movements))
            .where(
                CashRegister.id == register_id,
                CashRegister.branch_id == branch_id,
                CashRegister.opened_by == user_id,
            )
            .execution_options(populate_existing=True)
        )
        register = (await self._db.execute(stmt)).scalar_one_or_none()
        if register is None:
            raise NotFoundError("Caixa não encontrado", code="cash_register_not_found")
        return register
