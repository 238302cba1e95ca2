"""Expense data access"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.models.expense import Expense


class ExpenseRepository:
    """Read access to expenses; writes happen in the expense form"""

    @staticmethod
    async def get_all(db: AsyncSession) -> List[Expense]:
        """
        Get every expense, most recent first.

        Args:
            db: Database session

        Returns:
            List of expenses
        """
        result = await db.execute(
            select(Expense).order_by(Expense.created_at.desc(), Expense.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def create(db: AsyncSession, expense: Expense) -> Expense:
        """
        Insert an expense (used by the seed script).

        Args:
            db: Database session
            expense: Expense to insert

        Returns:
            Created expense
        """
        db.add(expense)
        await db.flush()
        await db.refresh(expense)
        return expense
