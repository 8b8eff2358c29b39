"""Tests for TransactionReconciler - matching occurrences to posted transactions."""
from datetime import date

from models.occurrence import Occurrence
from models.transaction import Transaction


def _occ(d, amount=3750, type_="expense", category_id=1, matched=None):
    return Occurrence(
        date=d, amount=amount, type=type_, category_id=category_id,
        matched_transaction_id=matched,
    )


def _tx(tx_id, d, amount=3750, type_="expense", category_id=1):
    return Transaction(id=tx_id, date=d, type=type_, amount=amount, category_id=category_id)


class TestMatching:
    def test_example_one_transaction_one_match(self, reconciler):
        occurrences = [_occ(date(2025, 2, 1)), _occ(date(2025, 2, 1))]
        result = reconciler.reconcile(occurrences, [_tx(10, date(2025, 2, 1))])
        assert result[0].matched_transaction_id == 10
        assert result[1].matched_transaction_id is None

    def test_exact_day_beats_same_month_fallback(self, reconciler):
        occurrences = [_occ(date(2025, 2, 1), 500), _occ(date(2025, 2, 15), 500)]
        transactions = [_tx(1, date(2025, 2, 15), 500), _tx(2, date(2025, 2, 3), 500)]
        result = reconciler.reconcile(occurrences, transactions)
        assert result[0].matched_transaction_id == 2
        assert result[1].matched_transaction_id == 1

    def test_same_month_drift_matches(self, reconciler):
        result = reconciler.reconcile([_occ(date(2025, 2, 1))], [_tx(7, date(2025, 2, 5))])
        assert result[0].matched_transaction_id == 7

    def test_different_month_does_not_match(self, reconciler):
        result = reconciler.reconcile([_occ(date(2025, 2, 1))], [_tx(7, date(2025, 1, 31))])
        assert result[0].matched_transaction_id is None

    def test_type_must_match(self, reconciler):
        result = reconciler.reconcile(
            [_occ(date(2025, 2, 1))], [_tx(7, date(2025, 2, 1), type_="income")]
        )
        assert result[0].matched_transaction_id is None

    def test_amount_must_match_exactly(self, reconciler):
        result = reconciler.reconcile(
            [_occ(date(2025, 2, 1))], [_tx(7, date(2025, 2, 1), amount=3750.01)]
        )
        assert result[0].matched_transaction_id is None

    def test_amount_compared_in_cents(self, reconciler):
        result = reconciler.reconcile(
            [_occ(date(2025, 2, 1), amount=0.3)], [_tx(7, date(2025, 2, 1), amount=0.1 + 0.2)]
        )
        assert result[0].matched_transaction_id == 7

    def test_category_mismatch(self, reconciler):
        result = reconciler.reconcile(
            [_occ(date(2025, 2, 1))], [_tx(7, date(2025, 2, 1), category_id=2)]
        )
        assert result[0].matched_transaction_id is None

    def test_missing_category_is_not_a_mismatch(self, reconciler):
        result = reconciler.reconcile(
            [_occ(date(2025, 2, 1), category_id=None)], [_tx(7, date(2025, 2, 1))]
        )
        assert result[0].matched_transaction_id == 7
        result = reconciler.reconcile(
            [_occ(date(2025, 2, 1))], [_tx(8, date(2025, 2, 1), category_id=None)]
        )
        assert result[0].matched_transaction_id == 8

    def test_each_transaction_used_once(self, reconciler):
        occurrences = [_occ(date(2025, 2, 1)), _occ(date(2025, 2, 20))]
        result = reconciler.reconcile(occurrences, [_tx(7, date(2025, 2, 18))])
        assert [o.matched_transaction_id for o in result] == [None, 7]

    def test_unmatched_transaction_creates_nothing(self, reconciler):
        occurrences = [_occ(date(2025, 2, 1))]
        result = reconciler.reconcile(
            occurrences, [_tx(1, date(2025, 2, 1)), _tx(2, date(2025, 2, 2))]
        )
        assert len(result) == 1
        assert result[0].matched_transaction_id == 1
        assert [t.id for t in reconciler.unmatched_transactions(
            result, [_tx(1, date(2025, 2, 1)), _tx(2, date(2025, 2, 2))]
        )] == [2]


class TestEdgeCases:
    def test_no_transactions(self, reconciler):
        occurrences = [_occ(date(2025, 2, 1))]
        assert reconciler.reconcile(occurrences, []) == occurrences
        assert reconciler.reconcile(occurrences, None) == occurrences

    def test_input_not_mutated(self, reconciler):
        occurrences = [_occ(date(2025, 2, 1))]
        reconciler.reconcile(occurrences, [_tx(7, date(2025, 2, 1))])
        assert occurrences[0].matched_transaction_id is None

    def test_existing_match_kept(self, reconciler):
        occurrences = [_occ(date(2025, 2, 1), matched=7), _occ(date(2025, 2, 1))]
        result = reconciler.reconcile(occurrences, [_tx(7, date(2025, 2, 1))])
        assert result[0].matched_transaction_id == 7
        assert result[1].matched_transaction_id is None

    def test_order_preserved(self, reconciler):
        occurrences = [_occ(date(2025, 2, 20)), _occ(date(2025, 2, 1))]
        result = reconciler.reconcile(occurrences, [_tx(7, date(2025, 2, 1))])
        assert [o.date for o in result] == [date(2025, 2, 20), date(2025, 2, 1)]
        assert result[1].matched_transaction_id == 7
