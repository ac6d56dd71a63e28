import logging

from client_account import ClientAccount
from models import Transaction, TransactionType, ProcessingResult
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Routes transactions to client accounts in arrival order.
    Rejections are logged and returned; they never stop the run.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process(self, transaction: Transaction) -> ProcessingResult:
        result = self._dispatch(transaction)
        if not result.is_success:
            logger.error(f"Rejected {transaction}: {result.value}")
        return result

    def _dispatch(self, transaction: Transaction) -> ProcessingResult:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction)
            case _ if transaction.is_dispute_related:
                return self._handle_claim(transaction)
            case _:
                raise ValueError(f"Unhandled transaction type {transaction.transaction_type}")

    def _claim(self, transaction: Transaction) -> bool:
        """Claim the transaction id. Returns False if an earlier transfer already did."""
        if self._state.is_transaction_seen(transaction.transaction_id):
            return False
        self._state.claim_transaction_id(transaction.transaction_id)
        return True

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        if not self._claim(transaction):
            return ProcessingResult.DUPLICATE_TRANSACTION

        account = self._state.get_account(transaction.client_id)
        if account is not None:
            return account.deposit(transaction.transaction_id, transaction.amount)

        # Accounts only come into existence once a transfer succeeds.
        account = ClientAccount(client_id=transaction.client_id)
        result = account.deposit(transaction.transaction_id, transaction.amount)
        if result.is_success:
            logger.debug(f"Opened account for client {transaction.client_id}")
            self._state.add_account(account)
        return result

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        if not self._claim(transaction):
            return ProcessingResult.DUPLICATE_TRANSACTION

        account = self._state.get_account(transaction.client_id)
        if account is None:
            return ProcessingResult.ACCOUNT_NOT_FOUND
        return account.withdraw(transaction.transaction_id, transaction.amount)

    def _handle_claim(self, transaction: Transaction) -> ProcessingResult:
        account = self._state.get_account(transaction.client_id)
        if account is None:
            return ProcessingResult.ACCOUNT_NOT_FOUND

        match transaction.transaction_type:
            case TransactionType.DISPUTE:
                return account.dispute(transaction.transaction_id)
            case TransactionType.RESOLVE:
                return account.resolve(transaction.transaction_id)
            case TransactionType.CHARGEBACK:
                return account.chargeback(transaction.transaction_id)
            case _:
                raise ValueError(f"{transaction.transaction_type} is not a dispute-related type")
