"""In-memory room store.

Owns the code -> room mapping plus a sid -> code index for looking rooms up
by participant. It manages the collection only; game rules live in
:mod:`.lifecycle`.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .board import Board, Marker, empty_board

WAITING = 'waiting'
ACTIVE = 'active'
FINISHED = 'finished'
ABANDONED = 'abandoned'


def normalize_code(code) -> str:
    if not isinstance(code, str):
        return ''
    return code.upper()


@dataclass
class Room:
    code: str
    player_x: Optional[str] = None
    player_o: Optional[str] = None
    board: Board = field(default_factory=empty_board)
    turn: Marker = Marker.X
    status: str = WAITING
    idle_since: Optional[float] = None

    @property
    def participants(self) -> List[str]:
        return [sid for sid in (self.player_x, self.player_o) if sid is not None]

    @property
    def active(self) -> bool:
        return self.status == ACTIVE

    @property
    def is_full(self) -> bool:
        return len(self.participants) == 2

    def marker_for(self, sid: str) -> Optional[Marker]:
        if sid is None:
            return None
        if sid == self.player_x:
            return Marker.X
        if sid == self.player_o:
            return Marker.O
        return None

    def free_marker(self) -> Optional[Marker]:
        if self.player_x is None:
            return Marker.X
        if self.player_o is None:
            return Marker.O
        return None

    def seat(self, sid: str, marker: Marker) -> None:
        if marker is Marker.X:
            self.player_x = sid
        else:
            self.player_o = sid

    def unseat(self, sid: str) -> Optional[Marker]:
        marker = self.marker_for(sid)
        if marker is Marker.X:
            self.player_x = None
        elif marker is Marker.O:
            self.player_o = None
        return marker

    def restart(self) -> None:
        self.board = empty_board()
        self.turn = Marker.X
        self.status = ACTIVE
        self.idle_since = None

    def mark_idle(self) -> None:
        self.idle_since = time.monotonic()

    def to_dict(self):
        return {
            'code': self.code,
            'status': self.status,
            'players': {
                Marker.X.value: self.player_x,
                Marker.O.value: self.player_o,
            },
            'turn': self.turn.value,
        }


class RoomStore:
    def __init__(self) -> None:
        self._rooms: Dict[str, Room] = {}
        self._sid_to_code: Dict[str, str] = {}

    def __contains__(self, code) -> bool:
        return normalize_code(code) in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))

    def insert(self, room: Room) -> Room:
        if room.code in self._rooms:
            raise KeyError(f'room {room.code} already exists')
        self._rooms[room.code] = room
        for sid in room.participants:
            self.bind(sid, room.code)
        return room

    def get(self, code) -> Optional[Room]:
        key = normalize_code(code)
        if not key:
            return None
        return self._rooms.get(key)

    def remove(self, code) -> Optional[Room]:
        room = self._rooms.pop(normalize_code(code), None)
        if room:
            for sid in room.participants:
                self.unbind(sid)
        return room

    def bind(self, sid: str, code: str) -> None:
        self._sid_to_code[sid] = code

    def unbind(self, sid: str) -> None:
        self._sid_to_code.pop(sid, None)

    def find_by_participant(self, sid: str) -> Optional[Room]:
        code = self._sid_to_code.get(sid)
        if code is None:
            return None
        room = self._rooms.get(code)
        if room is None or sid not in room.participants:
            # Stale index entry
            self._sid_to_code.pop(sid, None)
            return None
        return room

    def clear(self) -> None:
        self._rooms.clear()
        self._sid_to_code.clear()
