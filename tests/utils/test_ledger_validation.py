"""Tests for ledger event validation and split helpers."""
import pytest
from pydantic import ValidationError

from groupledger.models.ledger import ExpenseEvent, SettlementEvent, Share
from groupledger.utils.ledger_validation import (
    InvalidLedgerEvent,
    UnknownParticipant,
    split_equally,
    validate_expense_event,
    validate_settlement_event,
)


def _expense(total, shares, payer="alice", group_id="g1"):
    return ExpenseEvent(
        event_id="e1",
        group_id=group_id,
        payer_id=payer,
        total_cents=total,
        shares=tuple(Share(user_id=uid, amount_cents=amt) for uid, amt in shares)
    )


class TestSplitEqually:
    def test_even_split(self):
        assert split_equally(9000, ["a", "b", "c"]) == [("a", 3000), ("b", 3000), ("c", 3000)]

    def test_remainder_goes_to_first_participants(self):
        parts = split_equally(1000, ["a", "b", "c"])
        assert parts == [("a", 334), ("b", 333), ("c", 333)]
        assert sum(amount for _, amount in parts) == 1000

    def test_single_participant(self):
        assert split_equally(1, ["a"]) == [("a", 1)]

    def test_no_participants(self):
        with pytest.raises(InvalidLedgerEvent):
            split_equally(1000, [])

    def test_duplicate_participants(self):
        with pytest.raises(InvalidLedgerEvent):
            split_equally(1000, ["a", "a"])


class TestValidateExpense:
    def test_valid(self):
        validate_expense_event(_expense(1000, [("alice", 500), ("bob", 500)]), "g1")

    def test_exact_sum_required(self):
        with pytest.raises(InvalidLedgerEvent, match="does not equal total"):
            validate_expense_event(_expense(1000, [("alice", 500), ("bob", 499)]), "g1")

    def test_non_positive_total(self):
        with pytest.raises(InvalidLedgerEvent, match="must be positive"):
            validate_expense_event(_expense(0, []), "g1")

    def test_negative_share(self):
        with pytest.raises(InvalidLedgerEvent, match="negative"):
            validate_expense_event(_expense(1000, [("alice", 1500), ("bob", -500)]), "g1")

    def test_duplicate_participant(self):
        with pytest.raises(InvalidLedgerEvent, match="more than once"):
            validate_expense_event(_expense(1000, [("bob", 500), ("bob", 500)]), "g1")

    def test_wrong_group(self):
        with pytest.raises(InvalidLedgerEvent) as exc_info:
            validate_expense_event(_expense(1000, [("bob", 1000)], group_id="g2"), "g1")
        assert exc_info.value.event_id == "e1"

    def test_unknown_payer(self):
        with pytest.raises(UnknownParticipant) as exc_info:
            validate_expense_event(
                _expense(1000, [("bob", 1000)], payer="mallory"), "g1", {"alice", "bob"}
            )
        assert exc_info.value.user_id == "mallory"

    def test_error_detail(self):
        with pytest.raises(InvalidLedgerEvent) as exc_info:
            validate_expense_event(_expense(1000, [("bob", 1)]), "g1")
        detail = exc_info.value.to_detail()
        assert detail["event_id"] == "e1"
        assert "Share sum" in detail["message"]


class TestValidateSettlement:
    def _settlement(self, payer="bob", receiver="alice", amount=100):
        return SettlementEvent(
            event_id="s1", group_id="g1", payer_id=payer, receiver_id=receiver, amount_cents=amount
        )

    def test_valid(self):
        validate_settlement_event(self._settlement(), "g1", {"alice", "bob"})

    def test_self_settlement(self):
        with pytest.raises(InvalidLedgerEvent, match="yourself"):
            validate_settlement_event(self._settlement(receiver="bob"), "g1")

    def test_non_positive_amount(self):
        with pytest.raises(InvalidLedgerEvent, match="positive"):
            validate_settlement_event(self._settlement(amount=0), "g1")

    def test_unknown_receiver(self):
        with pytest.raises(UnknownParticipant):
            validate_settlement_event(self._settlement(receiver="zed"), "g1", {"alice", "bob"})


class TestWholeCents:
    def test_expense_total_must_be_int(self):
        with pytest.raises(ValidationError):
            ExpenseEvent(event_id="e1", group_id="g1", payer_id="alice", total_cents=30.0)

    def test_fractional_share_rejected(self):
        with pytest.raises(ValidationError):
            Share(user_id="bob", amount_cents=0.5)

    def test_settlement_amount_rejects_bool(self):
        with pytest.raises(ValidationError):
            SettlementEvent(
                event_id="s1", group_id="g1", payer_id="bob", receiver_id="alice", amount_cents=True
            )
