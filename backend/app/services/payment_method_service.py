"""
PaymentMethodService — platform payment catalog and per-branch assignment.

Catalog writes are restricted to ``master`` users by the endpoint role guard;
branch assignment is scoped to the caller's branch.
"""
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from app.models.company import Company
from app.models.payment_method import BranchPaymentMethod, PaymentMethod
from app.models.user import User
from app.schemas.payment_method import (
    BranchPaymentAssignment,
    PaymentMethodCreate,
    PaymentMethodUpdate,
)
from app.services.branch_scope import BranchScopedService
from app.services.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class PaymentMethodService(BranchScopedService):

    async def create(self, payload: PaymentMethodCreate) -> PaymentMethod:
        await self._ensure_name_available(payload.name)
        method = PaymentMethod(name=payload.name, is_active=payload.is_active)
        self._db.add(method)
        try:
            await self._db.flush()
        except IntegrityError as exc:
            raise ConflictError(
                "Já existe um método de pagamento com este nome",
                code="payment_method_conflict",
            ) from exc
        return method

    async def list_active(self) -> list[PaymentMethod]:
        stmt = (
            select(PaymentMethod)
            .where(PaymentMethod.is_active.is_(True))
            .order_by(PaymentMethod.name.asc())
        )
        return list((await self._db.execute(stmt)).scalars().all())

    async def get(self, method_id: UUID) -> PaymentMethod:
        method = await self._db.get(PaymentMethod, method_id)
        if method is None:
            raise NotFoundError(
                "Método de pagamento não encontrado",
                code="payment_method_not_found",
            )
        return method

    async def update(self, method_id: UUID, payload: PaymentMethodUpdate) -> PaymentMethod:
        method = await self.get(method_id)
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("name") and changes["name"] != method.name:
            await self._ensure_name_available(changes["name"])
        for field_name, value in changes.items():
            setattr(method, field_name, value)
        await self._db.flush()
        return method

    async def deactivate(self, method_id: UUID) -> PaymentMethod:
        """Soft delete: branch assignments keep pointing at the row."""
        method = await self.get(method_id)
        method.is_active = False
        await self._db.flush()
        return method

    async def assign_to_branch(
        self,
        user_id: UUID,
        payments: list[BranchPaymentAssignment],
    ) -> list[BranchPaymentMethod]:
        """
        Upsert the caller's branch assignments and mark onboarding complete.

        Pairs not mentioned in ``payments`` are left untouched.
        """
        branch_id = await self._branch_id(user_id)

        for payment in payments:
            await self.get(payment.payment_method_id)
            stmt = select(BranchPaymentMethod).where(
                BranchPaymentMethod.branch_id == branch_id,
                BranchPaymentMethod.payment_method_id == payment.payment_method_id,
            )
            assignment = (await self._db.execute(stmt)).unique().scalar_one_or_none()
            if assignment is None:
                self._db.add(
                    BranchPaymentMethod(
                        branch_id=branch_id,
                        payment_method_id=payment.payment_method_id,
                        for_dine_in=payment.for_dine_in,
                        for_delivery=payment.for_delivery,
                    )
                )
            else:
                assignment.for_dine_in = payment.for_dine_in
                assignment.for_delivery = payment.for_delivery
        await self._db.flush()

        company_id = (
            await self._db.execute(select(User.company_id).where(User.id == user_id))
        ).scalar_one_or_none()
        if company_id is not None:
            await self._db.execute(
                update(Company)
                .where(Company.id == company_id)
                .values(onboarding_completed=True)
            )
        logger.info("Formas de pagamento atribuidas: filial=%s total=%d", branch_id, len(payments))
        return await self._list_for_branch(branch_id)

    async def list_branch_payments(self, user_id: UUID) -> list[BranchPaymentMethod]:
        branch_id = await self._branch_id(user_id)
        return await self._list_for_branch(branch_id)

    async def _list_for_branch(self, branch_id: UUID) -> list[BranchPaymentMethod]:
        stmt = (
            select(BranchPaymentMethod)
            .where(BranchPaymentMethod.branch_id == branch_id)
            .order_by(BranchPaymentMethod.created_at.asc())
            .execution_options(populate_existing=True)
        )
        return list((await self._db.execute(stmt)).unique().scalars().all())

    async def _ensure_name_available(self, name: str) -> None:
        stmt = select(PaymentMethod.id).where(PaymentMethod.name == name)
        if (await self._db.execute(stmt)).scalar_one_or_none() is not None:
            raise ConflictError(
                "Já existe um método de pagamento com este nome",
                code="payment_method_conflict",
            )
