"""Game domain services: board, room codes, room store and lifecycle.

This package contains pure(ish) domain logic that is driven by the socket
handlers, keeping transport concerns separated from core game mechanics.
"""

from .board import Marker, Outcome, evaluate
from .errors import RoomError
from .lifecycle import Dispatch, Message, RoomManager
from .store import Room, RoomStore

__all__ = [
    'Dispatch',
    'Marker',
    'Message',
    'Outcome',
    'Room',
    'RoomError',
    'RoomManager',
    'RoomStore',
    'evaluate',
]
