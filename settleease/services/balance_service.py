"""Settlement read side: balances, transactions, snapshots"""

from decimal import Decimal
from typing import Dict, Iterable, List, NamedTuple, Optional
from uuid import UUID

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.config import get_settings
from settleease.core.exceptions import NotFoundError
from settleease.models.expense import Expense
from settleease.repositories.expense_repository import ExpenseRepository
from settleease.repositories.manual_override_repository import \
    ManualOverrideRepository
from settleease.repositories.person_repository import PersonRepository
from settleease.repositories.settlement_payment_repository import \
    SettlementPaymentRepository
from settleease.schemas.balance import (PersonBalance, PersonSettlementDetail,
                                        SettlementSnapshot)
from settleease.schemas.expense import ExpenseRead
from settleease.schemas.person import PersonRead
from settleease.schemas.settlement import (CalculatedTransaction,
                                           ManualOverrideResponse,
                                           SettlementPaymentResponse)
from settleease.services.cache_service import CacheService
from settleease.services.settlement_calculations import (
    balance_status, calculate_net_balances, calculate_pairwise_transactions,
    simplify_balances)
from settleease.utils.decimal_utils import round_decimal, sum_decimals
from settleease.utils.hash_utils import compute_json_hash

settings = get_settings()
logger = structlog.get_logger(__name__)


class SettlementInputs(NamedTuple):
    """Everything the calculations read, as loaded from the store"""
    people: List[PersonRead]
    expenses: List[ExpenseRead]
    payments: List[SettlementPaymentResponse]
    overrides: List[ManualOverrideResponse]


class BalanceService:
    """Service for settlement calculations over the stored data"""

    @staticmethod
    def _parse_expenses(rows: Iterable[Expense]) -> List[ExpenseRead]:
        """
        Validate stored expenses, skipping rows that cannot be read.

        Args:
            rows: Expense ORM rows

        Returns:
            Parsed expenses
        """
        expenses: List[ExpenseRead] = []
        for row in rows:
            try:
                expenses.append(ExpenseRead.model_validate(row))
            except PydanticValidationError as e:
                logger.warning(
                    "expense_skipped_malformed",
                    expense_id=str(getattr(row, "id", None)),
                    errors=e.error_count(),
                )
        return expenses

    @staticmethod
    async def load_inputs(db: AsyncSession) -> SettlementInputs:
        """
        Load people, expenses, payments and active overrides.

        Args:
            db: Database session

        Returns:
            SettlementInputs
        """
        people = await PersonRepository.get_all(db)
        expenses = await ExpenseRepository.get_all(db)
        payments = await SettlementPaymentRepository.get_all(db)
        overrides = await ManualOverrideRepository.get_active(db)

        return SettlementInputs(
            people=[PersonRead.model_validate(p) for p in people],
            expenses=BalanceService._parse_expenses(expenses),
            payments=[SettlementPaymentResponse.model_validate(p) for p in payments],
            overrides=[ManualOverrideResponse.model_validate(o) for o in overrides],
        )

    @staticmethod
    def _rounded(transactions: Iterable[CalculatedTransaction]) -> List[CalculatedTransaction]:
        """Round amounts to cents for display"""
        return [
            t.model_copy(update={"amount": round_decimal(t.amount)})
            for t in transactions
        ]

    @staticmethod
    def _person_balances(
        people: Iterable[PersonRead], balances: Dict[UUID, Decimal]
    ) -> List[PersonBalance]:
        """Rounded balance of every known person, sorted by name"""
        person_balances = [
            PersonBalance(
                person=person,
                balance=round_decimal(balances.get(person.id, Decimal("0"))),
                status=balance_status(balances.get(person.id, Decimal("0"))),
            )
            for person in people
        ]
        person_balances.sort(key=lambda b: (b.person.name, str(b.person.id)))
        return person_balances

    @staticmethod
    def build_snapshot(
        inputs: SettlementInputs, data_hash: Optional[str] = None
    ) -> SettlementSnapshot:
        """
        Run all three calculations over already-loaded inputs.

        Args:
            inputs: Loaded settlement inputs
            data_hash: Precomputed hash of `inputs`, if the caller has one

        Returns:
            SettlementSnapshot with amounts rounded to cents
        """
        balances = calculate_net_balances(inputs.people, inputs.expenses, inputs.payments)
        pairwise = calculate_pairwise_transactions(
            inputs.people, inputs.expenses, inputs.payments
        )
        simplified = simplify_balances(balances, inputs.overrides)

        return SettlementSnapshot(
            data_hash=data_hash or BalanceService.compute_inputs_hash(inputs),
            balances=BalanceService._person_balances(inputs.people, balances),
            pairwise_transactions=BalanceService._rounded(pairwise),
            simplified_transactions=BalanceService._rounded(simplified),
        )

    @staticmethod
    def compute_inputs_hash(inputs: SettlementInputs) -> str:
        """
        Hash the calculation inputs.

        Clients key cached AI summaries by this value; it changes whenever any
        input that affects settlement changes.

        Args:
            inputs: Loaded settlement inputs

        Returns:
            SHA-256 hex digest
        """
        payload = {
            "people": [p.model_dump(mode="json") for p in inputs.people],
            "expenses": [e.model_dump(mode="json", by_alias=True) for e in inputs.expenses],
            "settlementPayments": [p.model_dump(mode="json") for p in inputs.payments],
            "manualOverrides": [o.model_dump(mode="json") for o in inputs.overrides],
        }
        return compute_json_hash(payload)

    @staticmethod
    async def get_net_balances(db: AsyncSession) -> List[PersonBalance]:
        """
        Get every person's net balance.

        Args:
            db: Database session

        Returns:
            List of PersonBalance sorted by person name
        """
        inputs = await BalanceService.load_inputs(db)
        balances = calculate_net_balances(inputs.people, inputs.expenses, inputs.payments)
        return BalanceService._person_balances(inputs.people, balances)

    @staticmethod
    async def get_pairwise_transactions(db: AsyncSession) -> List[CalculatedTransaction]:
        """
        Get direct debts between pairs of people.

        Args:
            db: Database session

        Returns:
            Pairwise transactions with contributing expense ids
        """
        inputs = await BalanceService.load_inputs(db)
        transactions = calculate_pairwise_transactions(
            inputs.people, inputs.expenses, inputs.payments
        )
        return BalanceService._rounded(transactions)

    @staticmethod
    async def get_simplified_transactions(db: AsyncSession) -> List[CalculatedTransaction]:
        """
        Get the simplified set of payments that settles everyone.

        Args:
            db: Database session

        Returns:
            Simplified transactions (manual overrides first)
        """
        inputs = await BalanceService.load_inputs(db)
        balances = calculate_net_balances(inputs.people, inputs.expenses, inputs.payments)
        return BalanceService._rounded(simplify_balances(balances, inputs.overrides))

    @staticmethod
    async def get_snapshot(db: AsyncSession, use_cache: bool = True) -> SettlementSnapshot:
        """
        Get balances and both transaction views in one call.

        The cache key is the hash of the inputs, so a cached snapshot is only
        ever reused for identical data.

        Args:
            db: Database session
            use_cache: Whether to use cache (default: True)

        Returns:
            SettlementSnapshot
        """
        inputs = await BalanceService.load_inputs(db)

        if not use_cache:
            return BalanceService.build_snapshot(inputs)

        data_hash = BalanceService.compute_inputs_hash(inputs)
        cache_key = f"settlement:snapshot:{data_hash}"
        cached = await CacheService.get(cache_key)
        if cached:
            return SettlementSnapshot.model_validate_json(cached)

        snapshot = BalanceService.build_snapshot(inputs, data_hash)
        await CacheService.set(
            cache_key,
            snapshot.model_dump_json(by_alias=True),
            ttl=settings.snapshot_cache_ttl,
        )
        return snapshot

    @staticmethod
    async def get_person_settlement(person_id: UUID, db: AsyncSession) -> PersonSettlementDetail:
        """
        Get the settlement picture from one person's point of view.

        Args:
            person_id: Person ID
            db: Database session

        Returns:
            PersonSettlementDetail

        Raises:
            NotFoundError: If person not found
        """
        person = await PersonRepository.get_by_id(db, person_id)
        if not person:
            raise NotFoundError(f"Person with ID {person_id} not found")

        inputs = await BalanceService.load_inputs(db)
        balances = calculate_net_balances(inputs.people, inputs.expenses, inputs.payments)
        balance = balances.get(person_id, Decimal("0"))

        simplified = BalanceService._rounded(simplify_balances(balances, inputs.overrides))
        pairwise = BalanceService._rounded(
            calculate_pairwise_transactions(inputs.people, inputs.expenses, inputs.payments)
        )

        to_make = [t for t in simplified if t.from_id == person_id]
        to_receive = [t for t in simplified if t.to_id == person_id]

        history = [
            p for p in inputs.payments
            if p.debtor_id == person_id or p.creditor_id == person_id
        ]
        history.sort(key=lambda p: p.settled_at, reverse=True)

        return PersonSettlementDetail(
            person=PersonRead.model_validate(person),
            balance=round_decimal(balance),
            status=balance_status(balance),
            total_to_pay=sum_decimals(t.amount for t in to_make),
            total_to_receive=sum_decimals(t.amount for t in to_receive),
            payments_to_make=to_make,
            payments_to_receive=to_receive,
            pairwise_debts=[
                t for t in pairwise if person_id in (t.from_id, t.to_id)
            ],
            payment_history=history,
        )
