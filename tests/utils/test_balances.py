"""
Tests for balance aggregation.

Covers:
- paid / owed / balance per participant and the sign convention
- trip total and zero-sum of balances
- payer resolution by user identity
- diagnostics for inconsistent snapshots (never corrected)
"""

import logging
import math
import pytest
from bson import ObjectId

from tripsplit.core.errors import ConsistencyError
from tripsplit.models.trip import RegisteredParticipant
from tripsplit.utils.balances import (
    STATUS_OWED,
    STATUS_OWES,
    STATUS_SETTLED,
    balance_status,
    compute_balances,
)


@pytest.fixture
def dinner(make_expense, alice, participant_a, participant_b):
    # Scenario 1: 100.00 paid by A, split 50/50
    return make_expense(100.0, alice.id, [(participant_a, 50), (participant_b, 50)], "Dinner")


@pytest.fixture
def taxi(make_expense, bob, participant_a, participant_b):
    # Scenario 2: 60.00 paid by B, split 33.33/66.67
    return make_expense(60.0, bob.id, [(participant_a, 33.33), (participant_b, 66.67)], "Taxi")


def test_single_expense_balances(trip, dinner, participant_a, participant_b):
    sheet = compute_balances(trip.participants, [dinner])

    a = sheet.balances[str(participant_a.participant_id)]
    b = sheet.balances[str(participant_b.participant_id)]

    assert (a.paid, a.owed, a.balance) == (100.0, 50.0, 50.0)
    assert (b.paid, b.owed, b.balance) == (0.0, 50.0, -50.0)
    assert a.status == STATUS_OWED
    assert b.status == STATUS_OWES
    assert a.display_name == "alice"
    assert sheet.trip_total == 100.0
    assert sheet.expense_count == 1
    assert sheet.is_consistent


def test_two_expenses_balances(trip, dinner, taxi, participant_a, participant_b):
    sheet = compute_balances(trip.participants, [dinner, taxi])

    a = sheet.balances[str(participant_a.participant_id)]
    b = sheet.balances[str(participant_b.participant_id)]

    assert a.owed == pytest.approx(50 + 19.998)
    assert b.owed == pytest.approx(50 + 40.002)
    assert a.balance == pytest.approx(30.0, abs=0.01)
    assert b.balance == pytest.approx(-30.0, abs=0.01)
    assert sheet.trip_total == pytest.approx(160.0)
    assert sheet.net_total == pytest.approx(0.0, abs=0.02)
    assert sheet.is_consistent


def test_removing_expense_reverts_balances(trip, dinner, taxi):
    # Scenario 5: deleting the second expense leaves scenario 1 values exactly
    before = compute_balances(trip.participants, [dinner])
    compute_balances(trip.participants, [dinner, taxi])
    after = compute_balances(trip.participants, [dinner])

    assert after.balances == before.balances
    assert after.trip_total == before.trip_total


def test_zero_sum_across_many_expenses(trip, carol, make_expense, alice, bob):
    carol_participant = RegisteredParticipant(user_id=carol.id, username=carol.username)
    trip.participants.append(carol_participant)
    a, b, c = trip.participants

    expenses = [
        make_expense(12.34, alice.id, [(a, 33.33), (b, 33.33), (c, 33.34)]),
        make_expense(99.99, bob.id, [(a, 10), (b, 45.5), (c, 44.5)]),
        make_expense(7.0, carol.id, [(c, 100)]),
        make_expense(250.0, alice.id, [(a, 0), (b, 50), (c, 50)]),
    ]
    sheet = compute_balances(trip.participants, expenses)

    assert sum(e.balance for e in sheet.balances.values()) == pytest.approx(0.0, abs=0.01 * len(expenses))
    assert sheet.is_consistent


def test_empty_trip(trip):
    sheet = compute_balances(trip.participants, [])

    assert sheet.trip_total == 0
    assert all(e.status == STATUS_SETTLED for e in sheet.balances.values())
    assert sheet.is_consistent


def test_placeholder_participant_owes(trip, placeholder, make_expense, alice, participant_a):
    trip.participants.append(placeholder)
    expense = make_expense(90.0, alice.id, [(participant_a, 50), (placeholder, 50)])

    sheet = compute_balances(trip.participants, [expense])

    dana = sheet.balances[str(placeholder.participant_id)]
    assert dana.display_name == "Dana"
    assert dana.paid == 0
    assert dana.balance == pytest.approx(-45.0)


def test_payer_resolved_by_identity_after_record_recreated(trip, dinner, alice, participant_b):
    # Alice's participant record is replaced by a new one for the same user
    recreated = RegisteredParticipant(user_id=alice.id, username=alice.username)
    participants = [recreated, participant_b]

    sheet = compute_balances(participants, [dinner])

    assert sheet.balances[str(recreated.participant_id)].paid == 100.0
    # the old record id no longer exists, so its share is reported
    assert any("unknown participant" in d for d in sheet.diagnostics)


def test_payer_no_longer_participant_is_reported(trip, make_expense, participant_a, participant_b, caplog):
    stranger = ObjectId()
    expense = make_expense(40.0, stranger, [(participant_a, 50), (participant_b, 50)])

    with caplog.at_level(logging.WARNING, logger="tripsplit.utils.balances"):
        sheet = compute_balances(trip.participants, [expense])

    assert not sheet.is_consistent
    assert any("payer" in d for d in sheet.diagnostics)
    assert any("net to zero" in d for d in sheet.diagnostics)
    assert sheet.net_total == pytest.approx(-40.0)
    # nothing was silently attributed to anyone
    assert all(e.paid == 0 for e in sheet.balances.values())
    assert "payer" in caplog.text


def test_incomplete_share_set_is_reported_not_fixed(trip, make_expense, alice, participant_a, participant_b):
    expense = make_expense(100.0, alice.id, [(participant_a, 50), (participant_b, 40)])

    sheet = compute_balances(trip.participants, [expense])

    assert any("90%" in d for d in sheet.diagnostics)
    assert sheet.balances[str(participant_b.participant_id)].owed == pytest.approx(40.0)
    with pytest.raises(ConsistencyError) as exc_info:
        sheet.raise_for_consistency()
    assert exc_info.value.detail["diagnostics"] == sheet.diagnostics


@pytest.mark.parametrize("balance, expected", [
    (10.0, STATUS_OWED),
    (0.011, STATUS_OWED),
    (0.005, STATUS_SETTLED),
    (0.0, STATUS_SETTLED),
    (-0.005, STATUS_SETTLED),
    (-3.5, STATUS_OWES),
])
def test_balance_status(balance, expected):
    assert balance_status(balance) == expected


def test_non_finite_amount_is_reported(trip, make_expense, alice, participant_a, participant_b):
    expense = make_expense(math.inf, alice.id, [(participant_a, 50), (participant_b, 50)])

    sheet = compute_balances(trip.participants, [expense])

    assert math.isnan(sheet.net_total)
    assert not sheet.is_consistent
    assert any("net to zero" in d for d in sheet.diagnostics)
