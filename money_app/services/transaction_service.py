from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from money_app import models

logger = logging.getLogger(__name__)


class WalletBalanceService:
    """Keep wallet balances in step with transaction mutations.

    Income adds to the wallet, expense subtracts. Updates are expressed as
    revert(old) + apply(new) so a changed wallet, type or amount all work the
    same way.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def apply(self, wallet_id: Optional[int], txn_type: models.TxnType, amount: float) -> None:
        self._apply_delta(wallet_id, self._signed(txn_type, amount))

    def revert(self, wallet_id: Optional[int], txn_type: models.TxnType, amount: float) -> None:
        self._apply_delta(wallet_id, -self._signed(txn_type, amount))

    def apply_transaction(self, tx: models.Transaction) -> None:
        self.apply(tx.wallet_id, tx.type, tx.amount)

    def revert_transaction(self, tx: models.Transaction) -> None:
        self.revert(tx.wallet_id, tx.type, tx.amount)

    @staticmethod
    def _signed(txn_type: models.TxnType, amount: float) -> float:
        magnitude = abs(float(amount or 0))
        return magnitude if txn_type == models.TxnType.INCOME else -magnitude

    def _apply_delta(self, wallet_id: Optional[int], delta: float) -> None:
        if wallet_id is None or delta == 0:
            return
        wallet = self.db.query(models.Wallet).filter(models.Wallet.id == wallet_id).first()
        if not wallet:
            logger.warning("balance update skipped: wallet %s not found", wallet_id)
            return
        current = float(wallet.balance or 0)
        wallet.balance = current + float(delta)


def resolve_wallet_id(db: Session, user_id: int, wallet_id: Optional[int]) -> Optional[int]:
    """Explicit wallet, else the user's default wallet, else any wallet."""
    if wallet_id is not None:
        return wallet_id
    wallet = (
        db.query(models.Wallet)
        .filter(models.Wallet.user_id == user_id)
        .order_by(models.Wallet.is_default.desc(), models.Wallet.id)
        .first()
    )
    return wallet.id if wallet else None
