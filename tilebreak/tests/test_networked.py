"""
Tests for two-peer play over an in-memory room.

Tests:
- Identity assignment and first turn
- Replication of moves and breaks
- Out-of-turn input
- Desync detection
- Restart realignment
- Transport guards
"""

import pytest

from ..bots import RandomPolicy
from ..engine_core.action import RejectCode
from ..engine_core.board import CellState, Position
from ..engine_core.events import RecordingListener
from ..engine_core.state import Participant, Phase
from ..exceptions import DesyncError, NotAuthority, RoomFull
from ..session.networked import NetworkedGame
from ..session.transport import InMemoryRoom, TransportListener


def play_out(peers, seed=0, max_actions=100):
    """Drive whichever peer holds the turn with a random policy until the match ends."""
    policy = RandomPolicy(seed=seed)
    for _ in range(max_actions):
        if peers[0].match.is_over:
            return
        peer = next(p for p in peers if p.is_my_turn)
        board = peer.match.board
        if peer.match.phase == Phase.AWAITING_MOVE:
            decision = policy.select_move(board, peer.my_participant.is_p1)
        else:
            decision = policy.select_break(board)
        assert peer.on_cell_clicked(decision.index)


class TestSetup:
    def test_identities(self, peers):
        alice, bob = peers
        assert alice.my_participant == Participant.P1
        assert bob.my_participant == Participant.P2
        assert alice.turns.is_authority
        assert not bob.turns.is_authority

    def test_first_turn_begins_when_room_fills(self, room, peers):
        alice, bob = peers
        assert room.turn == 1
        assert alice.current_turn == bob.current_turn == 1
        assert alice.is_my_turn
        assert not bob.is_my_turn

    def test_single_peer_waits(self, room):
        alice = NetworkedGame()
        room.join(alice)
        assert room.turn == 0
        assert not alice.is_my_turn
        assert not alice.started

    def test_room_full(self, room, peers):
        with pytest.raises(RoomFull):
            room.join(NetworkedGame())

    def test_listeners_notified(self, room):
        recorder = RecordingListener()
        alice = NetworkedGame(listeners=[recorder])
        room.join(alice)
        room.join(NetworkedGame())

        assert ("identity_assigned", (Participant.P1,)) in recorder.events
        assert recorder.events[-1] == ("turn_changed", (True,))


class TestReplication:
    def test_move_and_break_replicate(self, peers):
        alice, bob = peers

        assert alice.on_cell_clicked(7)
        assert bob.match.board.p1_pos == Position(2, 1)
        assert bob.match.phase == Phase.AWAITING_BREAK

        assert alice.on_cell_clicked(2)
        assert bob.match.board.get(2, 0) == CellState.BROKEN
        assert alice.match.board == bob.match.board

    def test_turn_passes_after_break(self, room, peers):
        alice, bob = peers
        alice.on_cell_clicked(7)
        alice.on_cell_clicked(2)

        assert room.turn == 2
        assert not alice.is_my_turn
        assert bob.is_my_turn
        assert alice.match.acting == bob.match.acting == Participant.P2

    def test_out_of_turn_click_rejected(self, peers):
        alice, bob = peers
        before = bob.match.board.copy()

        result = bob.on_cell_clicked(17)

        assert result.error_code == RejectCode.NOT_YOUR_TURN
        assert bob.match.board == before
        assert alice.match.board == before

    def test_illegal_local_input_is_not_sent(self, room, peers):
        alice, bob = peers
        sent_before = len(room.log)

        result = alice.on_cell_clicked(12)

        assert result.error_code == RejectCode.ILLEGAL_MOVE
        assert len(room.log) == sent_before
        assert alice.is_my_turn

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_full_game_replicas_identical(self, peers, seed):
        alice, bob = peers

        play_out(peers, seed=seed)

        assert alice.match.is_over
        assert bob.match.is_over
        assert alice.match.board == bob.match.board
        assert alice.match.status == bob.match.status
        assert not alice.is_my_turn
        assert not bob.is_my_turn
        assert alice.on_cell_clicked(0).error_code == RejectCode.GAME_OVER


class TestDesync:
    def test_action_from_wrong_participant(self, peers):
        alice, bob = peers
        with pytest.raises(DesyncError) as exc_info:
            bob.transport.send_action(17, False)
        assert exc_info.value.participant_id == bob.local_id

    def test_illegal_relayed_action(self, peers):
        alice, bob = peers
        # Bypasses alice's own rule check
        with pytest.raises(DesyncError) as exc_info:
            alice.transport.send_action(12, False)
        assert exc_info.value.index == 12
        assert bob.match.board.p1_pos == Position(2, 0)

    def test_only_authority_begins_turns(self, peers):
        alice, bob = peers
        with pytest.raises(NotAuthority):
            bob.transport.begin_turn()


class TestRestart:
    def test_restart_mid_turn_realigns_to_authority(self, room, peers):
        alice, bob = peers
        alice.on_cell_clicked(7)

        bob.request_restart()

        assert room.turn == 2
        assert alice.turns.offset == 1
        assert alice.is_my_turn
        assert not bob.is_my_turn
        assert alice.match.board == bob.match.board
        assert alice.match.board.p1_pos == Position(2, 0)
        assert alice.match.phase == Phase.AWAITING_MOVE

        assert alice.on_cell_clicked(7)
        assert alice.on_cell_clicked(2)
        assert bob.is_my_turn

    def test_rejoin_mid_match_restarts_for_everyone(self, room, peers):
        """A peer joining a half-played room gets the same fresh match as the survivor."""
        alice, bob = peers
        alice.on_cell_clicked(7)
        alice.on_cell_clicked(2)
        bob.on_cell_clicked(17)

        bob.transport.leave()
        assert not alice.is_my_turn
        assert alice.on_cell_clicked(0).error_code == RejectCode.NOT_YOUR_TURN

        carol = NetworkedGame()
        room.join(carol)

        assert alice.match.board == carol.match.board
        assert alice.match.board.p1_pos == Position(2, 0)
        assert alice.match.phase == carol.match.phase == Phase.AWAITING_MOVE
        assert alice.my_participant == Participant.P1
        assert carol.my_participant == Participant.P2
        assert alice.is_my_turn
        assert not carol.is_my_turn

        assert alice.on_cell_clicked(7)
        assert alice.on_cell_clicked(2)
        assert carol.is_my_turn
        assert carol.on_cell_clicked(17)
        assert alice.match.board == carol.match.board

    def test_authority_leaving_hands_restart_to_survivor(self, room, peers):
        alice, bob = peers
        alice.on_cell_clicked(7)

        alice.transport.leave()
        assert bob.turns.is_authority
        assert bob.my_participant == Participant.P1

        carol = NetworkedGame()
        room.join(carol)

        assert bob.match.board == carol.match.board
        assert bob.match.board.p1_pos == Position(2, 0)
        assert bob.is_my_turn
        assert carol.my_participant == Participant.P2

    def test_restart_after_game_over(self, peers):
        alice, bob = peers
        play_out(peers, seed=5)
        assert alice.match.is_over

        alice.request_restart()

        assert not alice.match.is_over
        assert not bob.match.is_over
        assert alice.is_my_turn
        assert alice.my_participant == Participant.P1
        assert bob.my_participant == Participant.P2
        play_out(peers, seed=6)
        assert alice.match.board == bob.match.board


class TestTransport:
    def test_duplicate_finishing_action_dropped(self):
        room = InMemoryRoom()
        first = room.join(TransportListener())
        room.join(TransportListener())
        first.begin_turn()

        assert first.send_action(3, True)
        assert first.is_local_already_finished_this_turn()
        assert not first.send_action(4, True)

        first.begin_turn()
        assert not first.is_local_already_finished_this_turn()

    def test_authority_handover_on_leave(self):
        room = InMemoryRoom()
        first = room.join(TransportListener())
        second = room.join(TransportListener())

        first.leave()

        assert room.authority == second.local_id
        second.begin_turn()
        assert room.turn == 1

    def test_messages_delivered_in_order(self):
        class Recorder(TransportListener):
            def __init__(self):
                self.seen = []

            def on_turn_begins(self, turn):
                self.seen.append(("turn", turn))

            def on_remote_action(self, participant_id, turn, index, finished):
                self.seen.append(("action", index))

        room = InMemoryRoom()
        a, b = Recorder(), Recorder()
        ta = room.join(a)
        room.join(b)
        ta.begin_turn()
        ta.send_action(1, False)
        ta.send_action(2, True)

        assert a.seen == b.seen == [("turn", 1), ("action", 1), ("action", 2)]
