"""Unit tests for the balance calculator"""

import random
import pytest
from decimal import Decimal
from splitledger.domain.balances import calculate_balances, summarize_participant
from splitledger.domain.exceptions import PrecisionOverflowError
from splitledger.domain.models import SplitStatus


def test_equal_split_with_unpaid_members(make_split):
    """A paid 90 split three ways; B and C still owe 30 each"""
    split = make_split("g1", "A", [("A", "30"), ("B", "30"), ("C", "30")])

    balances = calculate_balances([split])

    assert balances == {"A": Decimal("60"), "B": Decimal("-30"), "C": Decimal("-30")}


def test_paid_members_contribute_nothing(make_split):
    split = make_split("g1", "A", [("A", "30"), ("B", "30", True), ("C", "30")])

    balances = calculate_balances([split])

    assert balances == {"A": Decimal("30"), "C": Decimal("-30")}


def test_settled_split_excluded_even_with_unpaid_members(make_split):
    settled = make_split("g1", "A", [("B", "40"), ("C", "40")], status=SplitStatus.SETTLED)
    active = make_split("g1", "B", [("C", "10")])

    balances = calculate_balances([settled, active])

    assert balances == {"B": Decimal("10"), "C": Decimal("-10")}


def test_sub_epsilon_balance_excluded(make_split):
    """0.0000001 is below epsilon and treated as exactly zero"""
    tiny = make_split("g1", "A", [("B", "0.0000001")])
    real = make_split("g1", "C", [("D", "5")])

    balances = calculate_balances([tiny, real])

    assert "A" not in balances
    assert "B" not in balances
    assert balances == {"C": Decimal("5"), "D": Decimal("-5")}


def test_self_owed_share_nets_to_zero(make_split):
    """Payer listed as unpaid member of their own split is skipped"""
    split = make_split("g1", "A", [("A", "50")])

    assert calculate_balances([split]) == {}


def test_balances_cancel_across_splits(make_split):
    splits = [
        make_split("g1", "A", [("B", "25")]),
        make_split("g1", "B", [("A", "25")]),
    ]

    assert calculate_balances(splits) == {}


def test_perspective_does_not_change_arithmetic(make_split):
    split = make_split("g1", "A", [("A", "30"), ("B", "30"), ("C", "30")])

    assert calculate_balances([split], perspective="B") == calculate_balances([split])


def test_unrepresentable_owed_amount_raises(make_split):
    split = make_split("g1", "A", [("B", "1e20")])

    with pytest.raises(PrecisionOverflowError):
        calculate_balances([split])


@pytest.mark.parametrize("seed", range(25))
def test_conservation_on_random_splits(make_split, seed):
    """Balances always sum to zero, whatever the split mix"""
    rng = random.Random(seed)
    people = [f"0x{i:02d}" for i in range(rng.randint(2, 8))]
    splits = []

    for _ in range(rng.randint(1, 15)):
        payer = rng.choice(people)
        members = rng.sample(people, rng.randint(1, len(people)))
        splits.append(
            make_split(
                f"g{rng.randint(1, 3)}",
                payer,
                [(p, f"{rng.randint(1, 50000) / 100:.2f}", rng.random() < 0.3) for p in members],
                status=SplitStatus.SETTLED if rng.random() < 0.2 else SplitStatus.ACTIVE,
            )
        )

    balances = calculate_balances(splits)

    assert sum(balances.values(), Decimal(0)) == 0
    assert all(b != 0 for b in balances.values())


def test_summarize_participant_totals(make_split):
    splits = [
        # A paid: B and C owe A, A's own share ignored
        make_split("g1", "A", [("A", "30"), ("B", "30"), ("C", "30", True)]),
        # B paid: A owes B
        make_split("g1", "B", [("A", "12.50"), ("B", "12.50")]),
        # Settled split never counts
        make_split("g1", "C", [("A", "99")], status=SplitStatus.SETTLED),
    ]

    owed_by, owed_to = summarize_participant(splits, "A")

    assert owed_by == Decimal("12.50")
    assert owed_to == Decimal("30")
