from typing import Dict, Optional, Set

from client_account import ClientAccount


class StateManager:
    """
    Client accounts and the set of transaction ids already claimed.
    Owned by the single consumer, so no locking is needed.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        # Independent of the per-account ledgers: a failed deposit/withdrawal still claims its id.
        self._seen_transaction_ids: Set[int] = set()

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def add_account(self, account: ClientAccount) -> None:
        self._accounts[account.client_id] = account

    def is_transaction_seen(self, transaction_id: int) -> bool:
        return transaction_id in self._seen_transaction_ids

    def claim_transaction_id(self, transaction_id: int) -> None:
        self._seen_transaction_ids.add(transaction_id)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts ordered by client id (for final output)."""
        return {client_id: self._accounts[client_id] for client_id in sorted(self._accounts)}
