import logging
import math
from typing import Optional

from fastapi import HTTPException, status

from groupledger.core.config import settings
from groupledger.db.session import get_database
from groupledger.models.base import utcnow
from groupledger.models.expense import Expense, ExpenseSplit, SplitType
from groupledger.models.group import Group
from groupledger.repositories.expense_repo import ExpenseRepository
from groupledger.schemas.expense import (
    ExpenseCreate,
    ExpenseListResponse,
    ExpenseResponse,
    ExpenseUpdate,
    Pagination,
)
from groupledger.utils.ledger_validation import (
    InvalidLedgerEvent,
    split_equally,
    validate_expense_event,
)

logger = logging.getLogger(__name__)


class ExpenseService:
    @staticmethod
    def build_expense(expense_in: ExpenseCreate, group: Group, user_id: str) -> Expense:
        """
        Turn a request into an expense document with concrete cent splits.

        Raises UnknownParticipant if the payer or a participant is outside the
        group, and InvalidLedgerEvent if the splits don't add up to the amount.
        """
        user_ids = [split.user_id for split in expense_in.splits]

        if expense_in.split_type == SplitType.EQUAL:
            parts = split_equally(expense_in.amount_cents, user_ids)
        else:
            parts = [(split.user_id, split.amount_cents) for split in expense_in.splits]

        expense = Expense(
            group_id=group.id,
            description=expense_in.description,
            amount_cents=expense_in.amount_cents,
            paid_by=expense_in.paid_by,
            split_type=expense_in.split_type,
            splits=[ExpenseSplit(user_id=uid, amount_cents=cents) for uid, cents in parts],
            created_by=user_id
        )

        # Same rules the ledger applies when it reads this back
        validate_expense_event(expense.to_event(), str(group.id), set(group.member_ids()))
        return expense

    @staticmethod
    async def create(expense_in: ExpenseCreate, group: Group, user_id: str) -> Expense:
        expense = ExpenseService.build_expense(expense_in, group, user_id)

        db = await get_database()
        expense = await ExpenseRepository(db).insert_expense(expense)
        logger.info(
            "Expense %s (%d cents) recorded in group %s",
            expense.id, expense.amount_cents, group.id
        )
        return expense

    @staticmethod
    async def update(expense: Expense, expense_update: ExpenseUpdate, group: Group) -> Expense:
        """
        Apply a partial edit and re-check the result as a ledger event.

        Without new splits the current participants are kept. Equal splits are
        recomputed from the (possibly new) amount; custom splits keep their
        amounts, so changing the amount alone of a custom expense is rejected.
        """
        changes = expense_update.model_dump(exclude_none=True)
        amount_cents = changes.get("amount_cents", expense.amount_cents)
        split_type = changes.get("split_type", expense.split_type)

        if expense_update.splits is not None:
            splits = [(split.user_id, split.amount_cents) for split in expense_update.splits]
        else:
            splits = [(split.user_id, split.amount_cents) for split in expense.splits]

        if split_type == SplitType.EQUAL:
            parts = split_equally(amount_cents, [uid for uid, _ in splits])
        else:
            missing = [uid for uid, cents in splits if cents is None]
            if missing:
                raise InvalidLedgerEvent(
                    f"Custom split missing amount for: {', '.join(missing)}",
                    str(expense.id)
                )
            parts = splits

        changes["splits"] = [ExpenseSplit(user_id=uid, amount_cents=cents) for uid, cents in parts]
        changes["updated_at"] = utcnow()
        updated = expense.model_copy(update=changes)

        validate_expense_event(updated.to_event(), str(group.id), set(group.member_ids()))

        db = await get_database()
        updated = await ExpenseRepository(db).update_expense(updated)
        logger.info("Expense %s updated in group %s", updated.id, group.id)
        return updated

    @staticmethod
    async def list_for_group(group: Group, page: int = 1, limit: Optional[int] = None) -> ExpenseListResponse:
        limit = min(limit or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
        page = max(page, 1)
        skip = (page - 1) * limit

        db = await get_database()
        repo = ExpenseRepository(db)
        total = await repo.count_for_group(str(group.id))
        expenses = await repo.list_for_group(str(group.id), skip=skip, limit=limit)

        return ExpenseListResponse(
            expenses=[ExpenseResponse.from_expense(expense) for expense in expenses],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                has_more=skip + len(expenses) < total,
                total_pages=math.ceil(total / limit)
            )
        )

    @staticmethod
    async def get(expense_id: str) -> Expense:
        db = await get_database()
        expense = await ExpenseRepository(db).get_expense(expense_id)
        if not expense:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
        return expense

    @staticmethod
    async def delete(expense: Expense) -> None:
        db = await get_database()
        await ExpenseRepository(db).delete_expense(str(expense.id))
        logger.info("Expense %s deleted from group %s", expense.id, expense.group_id)
