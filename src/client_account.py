from dataclasses import dataclass, field
from typing import Dict, Optional

from fixed_decimal import FixedDecimal, ZERO
from models import DisputeStatus, LedgerEntry, ProcessingResult, TransactionType


@dataclass
class ClientAccount:
    """
    One client's balances and the ledger of deposits/withdrawals it accepted.
    Every operation returns a ProcessingResult and leaves the account untouched
    unless it returns SUCCESS.

    A locked account refuses deposits, withdrawals and new disputes, but
    disputes opened before the lock can still be resolved or charged back.
    """

    client_id: int
    available: FixedDecimal = ZERO
    held: FixedDecimal = ZERO
    locked: bool = False
    ledger: Dict[int, LedgerEntry] = field(default_factory=dict, repr=False)

    @property
    def total(self) -> FixedDecimal:
        return self.available + self.held

    def deposit(self, transaction_id: int, amount: Optional[FixedDecimal]) -> ProcessingResult:
        rejection = self._validate_transfer(transaction_id, amount)
        if rejection is not None:
            return rejection

        available = self.available.checked_add(amount)
        if available is None or available.checked_add(self.held) is None:
            return ProcessingResult.AMOUNT_OVERFLOW

        self.available = available
        self.ledger[transaction_id] = LedgerEntry(TransactionType.DEPOSIT, amount)
        return ProcessingResult.SUCCESS

    def withdraw(self, transaction_id: int, amount: Optional[FixedDecimal]) -> ProcessingResult:
        rejection = self._validate_transfer(transaction_id, amount)
        if rejection is not None:
            return rejection

        if amount > self.available:
            return ProcessingResult.INSUFFICIENT_FUNDS

        self.available = self.available - amount
        self.ledger[transaction_id] = LedgerEntry(TransactionType.WITHDRAWAL, amount)
        return ProcessingResult.SUCCESS

    def dispute(self, transaction_id: int) -> ProcessingResult:
        if self.locked:
            return ProcessingResult.ACCOUNT_LOCKED

        entry = self.ledger.get(transaction_id)
        if entry is None:
            return ProcessingResult.TRANSACTION_NOT_FOUND

        # Withdrawn funds have already left the account, so there is nothing to hold.
        if entry.transaction_type is not TransactionType.DEPOSIT:
            return ProcessingResult.NOT_DISPUTABLE

        if entry.dispute_status is not DisputeStatus.NONE:
            return ProcessingResult.ALREADY_DISPUTED

        available = self.available.checked_subtract(entry.amount)
        held = self.held.checked_add(entry.amount)
        if available is None or held is None:
            return ProcessingResult.AMOUNT_OVERFLOW

        self.available = available
        self.held = held
        entry.dispute_status = DisputeStatus.DISPUTED
        return ProcessingResult.SUCCESS

    def resolve(self, transaction_id: int) -> ProcessingResult:
        entry, rejection = self._open_dispute(transaction_id)
        if rejection is not None:
            return rejection

        self.held = self.held - entry.amount
        self.available = self.available + entry.amount
        entry.dispute_status = DisputeStatus.RESOLVED
        return ProcessingResult.SUCCESS

    def chargeback(self, transaction_id: int) -> ProcessingResult:
        entry, rejection = self._open_dispute(transaction_id)
        if rejection is not None:
            return rejection

        self.held = self.held - entry.amount
        self.locked = True
        entry.dispute_status = DisputeStatus.CHARGED_BACK
        return ProcessingResult.SUCCESS

    def _validate_transfer(
        self, transaction_id: int, amount: Optional[FixedDecimal]
    ) -> Optional[ProcessingResult]:
        if self.locked:
            return ProcessingResult.ACCOUNT_LOCKED
        if amount is None:
            return ProcessingResult.MISSING_AMOUNT
        if amount.is_negative():
            return ProcessingResult.NEGATIVE_AMOUNT
        if transaction_id in self.ledger:
            return ProcessingResult.DUPLICATE_TRANSACTION
        return None

    def _open_dispute(self, transaction_id: int):
        """Look up a ledger entry that resolve/chargeback may act on. Not blocked by the lock."""
        entry = self.ledger.get(transaction_id)
        if entry is None:
            return None, ProcessingResult.TRANSACTION_NOT_FOUND
        if entry.dispute_status is not DisputeStatus.DISPUTED:
            return None, ProcessingResult.NOT_DISPUTED
        return entry, None
