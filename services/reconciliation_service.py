"""Best-effort matching of projected occurrences to posted transactions.

There is no key tying a rule's projected instance to a ledger row, so the
match is heuristic: same type, same amount to the cent, same category when
both sides carry one, and the same calendar month.  Closer dates win.
"""
import logging
from dataclasses import replace
from typing import Iterable, Optional

from models.occurrence import Occurrence
from models.transaction import Transaction
from utils.currency import to_cents
from utils.date_helpers import days_between, same_month

logger = logging.getLogger(__name__)


class TransactionReconciler:
    def reconcile(
        self,
        occurrences: Iterable[Occurrence],
        transactions: Optional[Iterable[Transaction]],
    ) -> list[Occurrence]:
        """
        Return the occurrences (same order) with matched_transaction_id set
        where a posted transaction accounts for them.  Never raises on
        well-formed input; with no transactions the input comes back as-is.
        """
        occurrences = list(occurrences)
        if not transactions:
            return occurrences
        transactions = list(transactions)

        used_tx_ids = {
            o.matched_transaction_id for o in occurrences if o.is_posted
        }
        open_tx = [t for t in transactions if t.id not in used_tx_ids]

        # Every (distance, occurrence, transaction) candidate, nearest first.
        candidates = []
        for occ_idx, occ in enumerate(occurrences):
            if occ.is_posted:
                continue
            for tx in open_tx:
                if self._is_candidate(occ, tx):
                    candidates.append((
                        days_between(occ.date, tx.date),
                        occ.date,
                        tx.date,
                        tx.id,
                        occ_idx,
                    ))
        candidates.sort()

        result = list(occurrences)
        matched_occ: set[int] = set()
        for _distance, _occ_date, _tx_date, tx_id, occ_idx in candidates:
            if occ_idx in matched_occ or tx_id in used_tx_ids:
                continue
            result[occ_idx] = replace(result[occ_idx], matched_transaction_id=tx_id)
            matched_occ.add(occ_idx)
            used_tx_ids.add(tx_id)

        logger.debug(
            "Reconciled %d of %d occurrence(s) against %d transaction(s)",
            len(matched_occ), len(occurrences), len(transactions),
        )
        return result

    def unmatched_transactions(
        self, occurrences: Iterable[Occurrence], transactions: Iterable[Transaction]
    ) -> list[Transaction]:
        """Transactions not referenced by any reconciled occurrence."""
        used = {o.matched_transaction_id for o in occurrences if o.is_posted}
        return [t for t in transactions if t.id not in used]

    def _is_candidate(self, occ: Occurrence, tx: Transaction) -> bool:
        if tx.type != occ.type:
            return False
        if to_cents(tx.amount) != to_cents(occ.amount):
            return False
        if (
            tx.category_id is not None
            and occ.category_id is not None
            and tx.category_id != occ.category_id
        ):
            return False
        return same_month(tx.date, occ.date)
