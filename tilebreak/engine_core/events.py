"""
Events - Notifications from the engine to the presentation layer.

A MatchListener receives board changes, phase changes, game over and
feedback cues. Listeners are registered explicitly on a ListenerSet
owned by whoever composes the system; there are no global subscriber
lists.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .state import MatchSnapshot, Participant, Phase, GameOverReason


class MatchListener:
    """
    Base class for presentation listeners.

    Every hook is a no-op so implementations override only what they draw.
    """

    def on_board_changed(self, snapshot: MatchSnapshot):
        pass

    def on_phase_changed(self, phase: Phase, acting: Participant):
        pass

    def on_game_over(self, winner: Participant, reason: GameOverReason):
        pass

    def on_step_cue(self):
        pass

    def on_break_cue(self):
        pass

    def on_game_over_cue(self):
        pass

    def on_turn_changed(self, is_local_turn: bool):
        """Input should be enabled only while is_local_turn is true."""
        pass

    def on_identity_assigned(self, participant: Participant):
        pass


class ListenerSet(MatchListener):
    """Fans every notification out to the registered listeners, in order."""

    def __init__(self, listeners: list[MatchListener] | None = None):
        self._listeners: list[MatchListener] = list(listeners or [])

    def add(self, listener: MatchListener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove(self, listener: MatchListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def __len__(self):
        return len(self._listeners)

    def on_board_changed(self, snapshot):
        for listener in list(self._listeners):
            listener.on_board_changed(snapshot)

    def on_phase_changed(self, phase, acting):
        for listener in list(self._listeners):
            listener.on_phase_changed(phase, acting)

    def on_game_over(self, winner, reason):
        for listener in list(self._listeners):
            listener.on_game_over(winner, reason)

    def on_step_cue(self):
        for listener in list(self._listeners):
            listener.on_step_cue()

    def on_break_cue(self):
        for listener in list(self._listeners):
            listener.on_break_cue()

    def on_game_over_cue(self):
        for listener in list(self._listeners):
            listener.on_game_over_cue()

    def on_turn_changed(self, is_local_turn):
        for listener in list(self._listeners):
            listener.on_turn_changed(is_local_turn)

    def on_identity_assigned(self, participant):
        for listener in list(self._listeners):
            listener.on_identity_assigned(participant)


class RecordingListener(MatchListener):
    """
    Listener that records every notification as (name, args) tuples.

    Handy for tests and for debugging a presenter.
    """

    def __init__(self):
        self.events: list[tuple[str, tuple]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def clear(self):
        self.events.clear()

    def on_board_changed(self, snapshot):
        self.events.append(("board_changed", (snapshot,)))

    def on_phase_changed(self, phase, acting):
        self.events.append(("phase_changed", (phase, acting)))

    def on_game_over(self, winner, reason):
        self.events.append(("game_over", (winner, reason)))

    def on_step_cue(self):
        self.events.append(("step_cue", ()))

    def on_break_cue(self):
        self.events.append(("break_cue", ()))

    def on_game_over_cue(self):
        self.events.append(("game_over_cue", ()))

    def on_turn_changed(self, is_local_turn):
        self.events.append(("turn_changed", (is_local_turn,)))

    def on_identity_assigned(self, participant):
        self.events.append(("identity_assigned", (participant,)))
