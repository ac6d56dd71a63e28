import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fixed_decimal import FixedDecimal

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2 ** 16 - 1
MAX_TRANSACTION_ID = 2 ** 32 - 1


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class DisputeStatus(Enum):
    NONE = "none"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    SUCCESS = "success"
    ACCOUNT_LOCKED = "account_locked"
    ACCOUNT_NOT_FOUND = "account_not_found"
    MISSING_AMOUNT = "missing_amount"
    NEGATIVE_AMOUNT = "negative_amount"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    NOT_DISPUTABLE = "not_disputable"
    ALREADY_DISPUTED = "already_disputed"
    NOT_DISPUTED = "not_disputed"
    AMOUNT_OVERFLOW = "amount_overflow"

    @property
    def is_success(self) -> bool:
        return self is ProcessingResult.SUCCESS


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[FixedDecimal] = None

    @property
    def is_dispute_related(self) -> bool:
        """Dispute, resolve and chargeback reference an earlier transaction instead of moving new funds."""
        return self.transaction_type in (
            TransactionType.DISPUTE,
            TransactionType.RESOLVE,
            TransactionType.CHARGEBACK,
        )

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class LedgerEntry:
    """A successfully applied deposit or withdrawal, kept for dispute lookups."""

    transaction_type: TransactionType
    amount: FixedDecimal
    dispute_status: DisputeStatus = DisputeStatus.NONE


class ProcessingStats:
    """Counters for the end-of-run report. Each counter is written by a single thread."""

    def __init__(self):
        self.applied = 0
        self.rejected = 0
        self.malformed = 0

    def record_success(self):
        self.applied += 1

    def record_failure(self):
        self.rejected += 1

    def record_malformed(self):
        self.malformed += 1

    def log_summary(self):
        logger.info(f"Applied: {self.applied}, Rejected: {self.rejected}, Malformed: {self.malformed}")
