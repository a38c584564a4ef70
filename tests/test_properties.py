"""
Property-based tests for the account state machine.

    For any transaction stream of one client:
        total == held + available after every operation
        a locked account never changes again
        replaying the same stream gives the same account
        independent deposits commute
"""
import sys
import os
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import ClientAccount, Transaction
from transaction_processor import TransactionProcessor

CLIENT_ID = 1

amounts = st.decimals(
    min_value=Decimal("-5"),
    max_value=Decimal("1000"),
    places=5,
    allow_nan=False,
    allow_infinity=False,
)
transaction_ids = st.integers(min_value=1, max_value=8)


@st.composite
def transactions(draw):
    transaction_type = draw(st.sampled_from(["deposit", "withdraw", "dispute", "resolve", "chargeback", "unknown"]))
    transaction_id = draw(transaction_ids)
    amount = None
    if transaction_type in ("deposit", "withdraw"):
        amount = draw(amounts)
    return Transaction(transaction_type, client_id=CLIENT_ID, transaction_id=transaction_id, amount=amount)


streams = st.lists(transactions(), max_size=40)


def snapshot(account):
    return (account.available, account.held, account.total, account.locked)


class TestAccountProperties:
    @given(streams)
    @settings(max_examples=200)
    def test_total_is_available_plus_held(self, stream):
        processor = TransactionProcessor()
        account = ClientAccount(client_id=CLIENT_ID)

        for index in range(len(stream)):
            processor.process_transaction(account, stream, index)
            assert account.total == account.available + account.held

    @given(streams)
    @settings(max_examples=200)
    def test_locked_account_is_frozen(self, stream):
        processor = TransactionProcessor()
        account = ClientAccount(client_id=CLIENT_ID)
        frozen = None

        for index in range(len(stream)):
            processor.process_transaction(account, stream, index)
            if frozen is not None:
                assert snapshot(account) == frozen
            elif account.locked:
                frozen = snapshot(account)

    @given(streams)
    @settings(max_examples=100)
    def test_replay_is_deterministic(self, stream):
        first, first_stats = TransactionProcessor().replay(CLIENT_ID, stream)
        second, second_stats = TransactionProcessor().replay(CLIENT_ID, stream)

        assert first == second
        assert first_stats == second_stats

    @given(
        st.lists(st.decimals(min_value=Decimal("0.0001"), max_value=Decimal("10000"), places=4), min_size=1, max_size=20),
        st.randoms(use_true_random=False),
    )
    @settings(max_examples=100)
    def test_deposits_commute(self, values, rnd):
        deposits = [
            Transaction("deposit", client_id=CLIENT_ID, transaction_id=i, amount=value)
            for i, value in enumerate(values)
        ]
        shuffled = list(deposits)
        rnd.shuffle(shuffled)

        in_order, _ = TransactionProcessor().replay(CLIENT_ID, deposits)
        reordered, _ = TransactionProcessor().replay(CLIENT_ID, shuffled)

        assert in_order.total == reordered.total
        assert in_order.available == reordered.available
        assert in_order.total == sum(values)
