"""Settlement arithmetic: net balances, pairwise debts and debt simplification

Every function here is pure. Nothing is cached or updated incrementally; callers
re-run the calculations against the full people/expense/payment lists whenever
any of them changes. Malformed amounts count as zero instead of raising.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Set, Tuple
from uuid import UUID

from settleease.schemas.expense import ExpenseRead, PayerShare
from settleease.schemas.person import PersonRead
from settleease.schemas.settlement import (CalculatedTransaction,
                                           ManualOverrideResponse,
                                           SettlementPaymentResponse)
from settleease.utils.decimal_utils import (TOLERANCE, ZERO, is_negligible,
                                             to_decimal)

BALANCE_OWED = "owed"
BALANCE_OWES = "owes"
BALANCE_SETTLED = "settled"

PairKey = Tuple[UUID, UUID]


def balance_status(balance: Decimal) -> str:
    """
    Classify a net balance.

    Args:
        balance: Signed net balance

    Returns:
        "owed" above +0.01, "owes" below -0.01, "settled" otherwise
    """
    if balance > TOLERANCE:
        return BALANCE_OWED
    if balance < -TOLERANCE:
        return BALANCE_OWES
    return BALANCE_SETTLED


def _settleable(expenses: Iterable[ExpenseRead]) -> List[ExpenseRead]:
    return [e for e in expenses if not e.exclude_from_settlement]


def _totals_by_person(entries: Iterable[PayerShare]) -> Dict[UUID, Decimal]:
    """Sum amounts per person, keeping first-seen order and dropping non-positive totals"""
    totals: Dict[UUID, Decimal] = {}
    for entry in entries:
        totals[entry.person_id] = totals.get(entry.person_id, ZERO) + to_decimal(entry.amount)
    return {person_id: amount for person_id, amount in totals.items() if amount > 0}


def _adjust(balances: Dict[UUID, Decimal], person_id: UUID, delta: Decimal) -> None:
    balances[person_id] = balances.get(person_id, ZERO) + delta


def calculate_net_balances(
    people: Iterable[PersonRead],
    expenses: Iterable[ExpenseRead],
    settlement_payments: Iterable[SettlementPaymentResponse],
) -> Dict[UUID, Decimal]:
    """
    Compute each person's signed net balance.

    Positive means the person is owed money, negative means they owe. Payers
    are credited, sharers and celebration contributors are debited, and each
    settlement payment moves `amount_settled` from the creditor's balance to
    the debtor's. Ids missing from `people` get a balance on demand.

    Args:
        people: Group members
        expenses: Expenses; those flagged exclude_from_settlement are ignored
        settlement_payments: Recorded payments

    Returns:
        Mapping of person id to balance
    """
    balances: Dict[UUID, Decimal] = {person.id: ZERO for person in people}

    for expense in _settleable(expenses):
        for payment in expense.paid_by:
            _adjust(balances, payment.person_id, to_decimal(payment.amount))

        for share in expense.shares:
            _adjust(balances, share.person_id, -to_decimal(share.amount))

        # The contribution is an extra obligation on top of the contributor's share
        contribution = expense.celebration_contribution
        if contribution is not None:
            contribution_amount = to_decimal(contribution.amount)
            if contribution_amount > 0:
                _adjust(balances, contribution.person_id, -contribution_amount)

    for payment in settlement_payments:
        amount = to_decimal(payment.amount_settled)
        _adjust(balances, payment.debtor_id, amount)
        _adjust(balances, payment.creditor_id, -amount)

    return balances


def _ordered_pair(debtor_id: UUID, creditor_id: UUID) -> Tuple[PairKey, int]:
    """Canonical key for an unordered pair, and the sign of debtor->creditor along it"""
    if str(debtor_id) <= str(creditor_id):
        return (debtor_id, creditor_id), 1
    return (creditor_id, debtor_id), -1


def calculate_pairwise_transactions(
    people: Iterable[PersonRead],
    expenses: Iterable[ExpenseRead],
    settlement_payments: Iterable[SettlementPaymentResponse],
) -> List[CalculatedTransaction]:
    """
    Derive person-to-person debts from the expenses that created them.

    Within an expense each sharer owes each other payer
    `share * paid / total_paid` (their whole share when there is one payer).
    Celebration contributions are not attributed here; they only affect net
    balances. Debts in both directions between a pair are netted, then
    payments recorded between that pair are applied. Pairs left at or under
    the tolerance, or that payments would flip into the opposite direction,
    are dropped.

    Args:
        people: Group members (used for ordering by name)
        expenses: Expenses; excluded ones are ignored
        settlement_payments: Recorded payments

    Returns:
        Transactions sorted by debtor name then creditor name, each with the
        ids of the expenses that contributed to it
    """
    names = {person.id: person.name for person in people}

    # Signed amount per unordered pair; positive means key[0] owes key[1]
    expense_debts: Dict[PairKey, Decimal] = defaultdict(lambda: ZERO)
    contributing: Dict[PairKey, Set[UUID]] = defaultdict(set)

    for expense in _settleable(expenses):
        payers = _totals_by_person(expense.paid_by)
        total_paid = sum(payers.values(), ZERO)
        if total_paid <= 0:
            continue

        for sharer_id, share_amount in _totals_by_person(expense.shares).items():
            for payer_id, paid_amount in payers.items():
                if payer_id == sharer_id:
                    continue

                if len(payers) == 1:
                    owed = share_amount
                else:
                    owed = share_amount * paid_amount / total_paid

                key, sign = _ordered_pair(sharer_id, payer_id)
                expense_debts[key] += sign * owed
                contributing[key].add(expense.id)

    settled: Dict[PairKey, Decimal] = defaultdict(lambda: ZERO)
    for payment in settlement_payments:
        if payment.debtor_id == payment.creditor_id:
            continue
        key, sign = _ordered_pair(payment.debtor_id, payment.creditor_id)
        settled[key] += sign * to_decimal(payment.amount_settled)

    transactions: List[CalculatedTransaction] = []
    for key, net in expense_debts.items():
        if is_negligible(net):
            continue

        remaining = net - settled.get(key, ZERO)
        if is_negligible(remaining) or (remaining > 0) != (net > 0):
            continue

        if remaining > 0:
            from_id, to_id, amount = key[0], key[1], remaining
        else:
            from_id, to_id, amount = key[1], key[0], -remaining

        transactions.append(
            CalculatedTransaction(
                from_id=from_id,
                to_id=to_id,
                amount=amount,
                contributing_expense_ids=sorted(contributing[key], key=str),
            )
        )

    transactions.sort(
        key=lambda t: (
            names.get(t.from_id, ""),
            names.get(t.to_id, ""),
            str(t.from_id),
            str(t.to_id),
        )
    )
    return transactions


def _apply_overrides(
    balances: Dict[UUID, Decimal],
    manual_overrides: Iterable[ManualOverrideResponse],
) -> List[CalculatedTransaction]:
    """Emit pinned transactions first, updating `balances` in place"""
    transactions: List[CalculatedTransaction] = []

    for override in manual_overrides:
        if not override.is_active:
            continue

        debtor_balance = balances.get(override.debtor_id, ZERO)
        creditor_balance = balances.get(override.creditor_id, ZERO)
        if debtor_balance >= -TOLERANCE or creditor_balance <= TOLERANCE:
            continue

        amount = min(-debtor_balance, creditor_balance, to_decimal(override.amount))
        if amount <= TOLERANCE:
            continue

        transactions.append(
            CalculatedTransaction(
                from_id=override.debtor_id, to_id=override.creditor_id, amount=amount
            )
        )
        balances[override.debtor_id] = debtor_balance + amount
        balances[override.creditor_id] = creditor_balance - amount

    return transactions


def simplify_balances(
    balances: Dict[UUID, Decimal],
    manual_overrides: Optional[Iterable[ManualOverrideResponse]] = None,
) -> List[CalculatedTransaction]:
    """
    Reduce net balances to a small set of payments.

    Active manual overrides are honoured first. The rest is a greedy sweep
    that repeatedly settles the largest remaining debtor against the largest
    remaining creditor, so at most `debtors + creditors - 1` payments are
    produced. Residuals within the tolerance are never emitted.

    Args:
        balances: Signed net balances (see calculate_net_balances)
        manual_overrides: Optional pinned payment paths

    Returns:
        Payments from debtors to creditors
    """
    remaining = dict(balances)
    transactions = _apply_overrides(remaining, manual_overrides or [])

    # [person_id, outstanding amount], largest first, ties by id
    debtors = [
        [person_id, -balance]
        for person_id, balance in remaining.items()
        if balance < -TOLERANCE
    ]
    creditors = [
        [person_id, balance]
        for person_id, balance in remaining.items()
        if balance > TOLERANCE
    ]
    debtors.sort(key=lambda entry: (-entry[1], str(entry[0])))
    creditors.sort(key=lambda entry: (-entry[1], str(entry[0])))

    debtor_index = 0
    creditor_index = 0

    while debtor_index < len(debtors) and creditor_index < len(creditors):
        debtor = debtors[debtor_index]
        creditor = creditors[creditor_index]

        # Both remainders are at least the tolerance here, so the amount is too
        amount = min(debtor[1], creditor[1])
        transactions.append(
            CalculatedTransaction(from_id=debtor[0], to_id=creditor[0], amount=amount)
        )

        debtor[1] -= amount
        creditor[1] -= amount

        if debtor[1] < TOLERANCE:
            debtor_index += 1
        if creditor[1] < TOLERANCE:
            creditor_index += 1

    return transactions


def calculate_simplified_transactions(
    people: Iterable[PersonRead],
    expenses: Iterable[ExpenseRead],
    settlement_payments: Iterable[SettlementPaymentResponse],
    manual_overrides: Optional[Iterable[ManualOverrideResponse]] = None,
) -> List[CalculatedTransaction]:
    """
    Minimal payments that settle every balance.

    Args:
        people: Group members
        expenses: Expenses
        settlement_payments: Recorded payments
        manual_overrides: Optional pinned payment paths

    Returns:
        Simplified transactions
    """
    balances = calculate_net_balances(people, expenses, settlement_payments)
    return simplify_balances(balances, manual_overrides)
