"""
Tests for turn resolution and restart realignment.
"""

import pytest

from ..engine_core.state import Participant
from ..session.turns import TurnCoordinator


class TestParticipantOrder:
    def test_authority_first_then_ascending(self):
        turns = TurnCoordinator(local_id=3, participants=[5, 3, 1], authority=3)
        assert turns.order == [3, 1, 5]
        assert turns.is_authority

    def test_missing_authority_defaults_to_lowest(self):
        turns = TurnCoordinator(local_id=2, participants=[4, 2])
        assert turns.authority == 2
        assert turns.order == [2, 4]

    def test_unknown_authority_defaults_to_lowest(self):
        turns = TurnCoordinator(local_id=2, participants=[4, 2], authority=9)
        assert turns.authority == 2

    def test_remove_authority_promotes_lowest(self):
        turns = TurnCoordinator(local_id=1, participants=[1, 2, 3], authority=1)
        turns.remove_participant(1)
        assert turns.authority == 2
        assert turns.order == [2, 3]

    def test_add_participant_keeps_authority(self):
        turns = TurnCoordinator(local_id=5, participants=[5], authority=5)
        turns.add_participant(2)
        assert turns.order == [5, 2]


class TestExpectedActor:
    def test_two_participants_alternate(self):
        """[A, B] with offset 0: A, B, A."""
        turns = TurnCoordinator(local_id="A", participants=["A", "B"], authority="A")
        assert turns.expected_actor_for_turn(1) == "A"
        assert turns.expected_actor_for_turn(2) == "B"
        assert turns.expected_actor_for_turn(3) == "A"

    def test_empty_list_resolves_to_none(self):
        turns = TurnCoordinator(local_id=1)
        assert turns.expected_actor_for_turn(1) is None
        assert turns.on_turn_begins(1) is None

    def test_is_local_turn(self):
        turns = TurnCoordinator(local_id=2, participants=[1, 2], authority=1)
        assert not turns.is_local_turn(1)
        assert turns.is_local_turn(2)


class TestRealign:
    def test_realign_at_turn_seven(self):
        """n=2, t=7: turn_mod 0, offset 0, authority acts."""
        turns = TurnCoordinator(local_id=1, participants=[1, 2], authority=1)
        turns.request_realign()

        actor = turns.on_turn_begins(7)

        assert turns.offset == 0
        assert actor == 1
        assert not turns.pending_realign

    @pytest.mark.parametrize("turn", range(1, 13))
    @pytest.mark.parametrize("participants", [[1, 2], [1, 2, 3]])
    def test_realign_always_resolves_to_authority(self, turn, participants):
        turns = TurnCoordinator(local_id=1, participants=participants, authority=1)
        turns.request_realign()

        assert turns.on_turn_begins(turn) == 1
        assert turns.expected_actor_for_turn(turn + 1) == participants[1]

    def test_realign_does_not_touch_counter_mapping_until_turn_begins(self):
        turns = TurnCoordinator(local_id=1, participants=[1, 2], authority=1)
        turns.request_realign()
        assert turns.expected_actor_for_turn(4) == 2
        assert turns.on_turn_begins(4) == 1
        assert turns.offset == 1

    def test_realign_is_applied_once(self):
        turns = TurnCoordinator(local_id=1, participants=[1, 2], authority=1)
        turns.request_realign()
        turns.on_turn_begins(4)
        assert turns.on_turn_begins(5) == 2
        assert turns.on_turn_begins(6) == 1


class TestIdentity:
    def test_position_zero_is_p1(self):
        turns = TurnCoordinator(local_id=1, participants=[1, 2], authority=1)
        assert turns.assign_local_identity() == Participant.P1
        assert turns.participant_for(2) == Participant.P2

    def test_non_authority_is_p2(self):
        turns = TurnCoordinator(local_id=2, participants=[1, 2], authority=1)
        assert turns.assign_local_identity() == Participant.P2

    def test_identity_follows_authority_change(self):
        turns = TurnCoordinator(local_id=2, participants=[1, 2], authority=1)
        turns.remove_participant(1)
        assert turns.assign_local_identity() == Participant.P1

    def test_unknown_participant(self):
        turns = TurnCoordinator(local_id=9, participants=[1, 2])
        assert turns.participant_for(9) is None
        assert turns.assign_local_identity() is None
