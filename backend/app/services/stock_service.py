"""
StockService — branch-scoped stock movements over products, options and ingredients.

The movement target is carried as a ``StockTarget`` value from the request
boundary down to the persistence edge, where it becomes one of three
nullable foreign-key columns.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import or_, select

from app.models.catalog import ComplementOption, Product
from app.models.ingredient import Ingredient
from app.models.stock_movement import StockMovement
from app.schemas.stock import StockItemType, StockMovementCreate, StockMovementResponse
from app.services.branch_scope import BranchScopedService
from app.services.errors import NotFoundError, ValidationError

TARGET_COLUMNS: dict[StockItemType, str] = {
    StockItemType.PRODUCT: "product_id",
    StockItemType.OPTION: "option_id",
    StockItemType.INGREDIENT: "ingredient_id",
}

TARGET_MODELS: dict[StockItemType, Any] = {
    StockItemType.PRODUCT: Product,
    StockItemType.OPTION: ComplementOption,
    StockItemType.INGREDIENT: Ingredient,
}

TARGET_NOT_FOUND: dict[StockItemType, tuple[str, str]] = {
    StockItemType.PRODUCT: ("Produto não encontrado", "product_not_found"),
    StockItemType.OPTION: ("Opção não encontrada", "option_not_found"),
    StockItemType.INGREDIENT: ("Ingrediente não encontrado", "ingredient_not_found"),
}


@dataclass(frozen=True)
class StockTarget:
    """The single catalog item a stock movement applies to."""

    kind: StockItemType
    item_id: UUID

    @classmethod
    def from_ids(
        cls,
        *,
        product_id: Optional[UUID] = None,
        option_id: Optional[UUID] = None,
        ingredient_id: Optional[UUID] = None,
        item_type: Optional[StockItemType] = None,
    ) -> StockTarget:
        """
        Build the target from the three optional request ids.

        Raises:
            ValidationError: zero or several ids given, or ``item_type``
                disagrees with the id that was given.
        """
        given = [
            (kind, item_id)
            for kind, item_id in (
                (StockItemType.PRODUCT, product_id),
                (StockItemType.OPTION, option_id),
                (StockItemType.INGREDIENT, ingredient_id),
            )
            if item_id is not None
        ]
        if len(given) != 1:
            raise ValidationError(
                "Deve ser fornecido exatamente um ID (produto, opção ou ingrediente)",
                code="invalid_stock_target",
            )
        kind, item_id = given[0]
        if item_type is not None and item_type != kind:
            raise ValidationError(
                "Tipo do item não corresponde ao ID informado",
                code="invalid_stock_target",
            )
        return cls(kind=kind, item_id=item_id)

    @classmethod
    def of(cls, movement: StockMovement) -> StockTarget:
        for kind, column in TARGET_COLUMNS.items():
            item_id = getattr(movement, column)
            if item_id is not None:
                return cls(kind=kind, item_id=item_id)
        raise ValueError(f"Stock movement {movement.id} has no target")

    def as_columns(self) -> dict[str, Optional[UUID]]:
        return {
            column: self.item_id if kind == self.kind else None
            for kind, column in TARGET_COLUMNS.items()
        }


def movement_to_response(movement: StockMovement) -> StockMovementResponse:
    target = StockTarget.of(movement)
    item = {
        StockItemType.PRODUCT: movement.product,
        StockItemType.OPTION: movement.option,
        StockItemType.INGREDIENT: movement.ingredient,
    }[target.kind]
    return StockMovementResponse(
        id=movement.id,
        branch_id=movement.branch_id,
        type=movement.type,
        item_type=target.kind,
        item_id=target.item_id,
        item_name=item.name if item is not None else None,
        product_id=movement.product_id,
        option_id=movement.option_id,
        ingredient_id=movement.ingredient_id,
        variation=movement.variation,
        quantity=movement.quantity,
        description=movement.description,
        created_at=movement.created_at,
    )


class StockService(BranchScopedService):

    async def create_movement(self, user_id: UUID, payload: StockMovementCreate) -> StockMovement:
        """
        Record a movement after the target is validated inside the branch.

        ``variation`` is stored with its sign; ``quantity`` is its magnitude.
        """
        branch_id = await self._branch_id(user_id)
        target = StockTarget.from_ids(
            product_id=payload.product_id,
            option_id=payload.option_id,
            ingredient_id=payload.ingredient_id,
            item_type=payload.item_type,
        )
        await self._ensure_target(branch_id, target)

        movement = StockMovement(
            branch_id=branch_id,
            type=payload.type.value,
            variation=payload.variation,
            quantity=abs(payload.variation),
            description=payload.reason,
            **target.as_columns(),
        )
        self._db.add(movement)
        await self._db.flush()
        return await self._get_in_branch(branch_id, movement.id)

    async def list_movements(
        self,
        user_id: UUID,
        *,
        item_type: Optional[StockItemType] = None,
        item_id: Optional[UUID] = None,
    ) -> list[StockMovement]:
        """
        List the branch's movements, newest first.

        An ``item_id`` without ``item_type`` matches any of the three columns;
        an ``item_type`` alone keeps only movements of that kind.
        """
        branch_id = await self._branch_id(user_id)
        stmt = select(StockMovement).where(StockMovement.branch_id == branch_id)

        if item_type is not None:
            column = getattr(StockMovement, TARGET_COLUMNS[item_type])
            stmt = stmt.where(column == item_id if item_id is not None else column.is_not(None))
        elif item_id is not None:
            stmt = stmt.where(
                or_(
                    StockMovement.product_id == item_id,
                    StockMovement.option_id == item_id,
                    StockMovement.ingredient_id == item_id,
                )
            )

        stmt = stmt.order_by(StockMovement.created_at.desc())
        return list((await self._db.execute(stmt)).unique().scalars().all())

    async def get_movement(self, user_id: UUID, movement_id: UUID) -> StockMovement:
        branch_id = await self._branch_id(user_id)
        return await self._get_in_branch(branch_id, movement_id)

    async def delete_movement(self, user_id: UUID, movement_id: UUID) -> None:
        branch_id = await self._branch_id(user_id)
        movement = await self._get_in_branch(branch_id, movement_id)
        await self._db.delete(movement)
        await self._db.flush()

    async def _ensure_target(self, branch_id: UUID, target: StockTarget) -> None:
        model = TARGET_MODELS[target.kind]
        stmt = select(model.id).where(model.id == target.item_id, model.branch_id == branch_id)
        if (await self._db.execute(stmt)).scalar_one_or_none() is None:
            detail, code = TARGET_NOT_FOUND[target.kind]
            raise NotFoundError(detail, code=code)

    async def _get_in_branch(self, branch_id: UUID, movement_id: UUID) -> StockMovement:
        stmt = select(StockMovement).where(
            StockMovement.id == movement_id,
            StockMovement.branch_id == branch_id,
        ).execution_options(populate_existing=True)
        movement = (await self._db.execute(stmt)).unique().scalar_one_or_none()
        if movement is None:
            raise NotFoundError("Movimentação não encontrada", code="movement_not_found")
        return movement
