"""
Exceptions - Protocol and hosting faults.

Rule rejections are not exceptions: the match returns a failed
ActionResult and changes nothing. The classes here cover faults the
core cannot resolve on its own, so the API layer can map them in one place.
"""


class TileBreakError(Exception):
    """Base class for all tilebreak errors."""
    pass


class DesyncError(TileBreakError):
    """A relayed action failed validation on the receiving peer."""

    def __init__(self, participant_id, turn, index, finished, reason=None):
        self.participant_id = participant_id
        self.turn = turn
        self.index = index
        self.finished = finished
        self.reason = reason
        super().__init__(
            f"Remote action from {participant_id} on turn {turn} "
            f"(index={index}, finished={finished}) rejected: {reason}"
        )


# ============ Room errors ============

class RoomNotFound(TileBreakError):
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class RoomFull(TileBreakError):
    """The room already holds two participants."""

    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Room {room_id} is full")


class ParticipantNotFound(TileBreakError):
    def __init__(self, participant_id):
        self.participant_id = participant_id
        super().__init__(f"Participant {participant_id} not found")


class NotAuthority(TileBreakError):
    """Only the designated authority may begin turns."""
    pass
