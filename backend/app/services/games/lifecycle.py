"""Room lifecycle: create, join, move, new game, disconnect and idle expiry.

Every public method runs to completion under one lock and returns a
:class:`Dispatch` describing who gets told what. Rule violations raise a
:class:`~.errors.RoomError`; the caller reports them to the requester only.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .board import DRAW, Marker, evaluate, serialize_board
from .codes import ROOM_CODE_LENGTH, generate_room_code
from .errors import (
    AlreadyInSession,
    GameNotActive,
    InsufficientPlayers,
    InvalidCode,
    InvalidMove,
    NotFound,
    NotInSession,
    NotYourTurn,
    SessionFull,
)
from .store import ABANDONED, FINISHED, WAITING, Room, RoomStore, normalize_code

GAME_START_MESSAGE = 'The game has started! X goes first.'
NEW_GAME_MESSAGE = 'New game! X goes first.'
DRAW_MESSAGE = 'Draw!'
OPPONENT_LEFT_MESSAGE = 'Your opponent disconnected.'
ROOM_EXPIRED_MESSAGE = 'Room closed after waiting too long for an opponent.'


@dataclass(frozen=True)
class Message:
    event: str
    payload: Dict[str, Any]
    to: str
    broadcast: bool = False
    skip_sid: Optional[str] = None


@dataclass
class Dispatch:
    room_code: Optional[str] = None
    messages: List[Message] = field(default_factory=list)
    # True when the room was removed from the store
    closed: bool = False

    def reply(self, sid: str, event: str, payload: Dict[str, Any]) -> 'Dispatch':
        self.messages.append(Message(event, payload, to=sid))
        return self

    def broadcast(self, event: str, payload: Dict[str, Any], skip_sid: Optional[str] = None) -> 'Dispatch':
        self.messages.append(Message(event, payload, to=self.room_code, broadcast=True, skip_sid=skip_sid))
        return self


def _game_start_payload(room: Room, message: str) -> Dict[str, Any]:
    return {
        'board': serialize_board(room.board),
        'currentPlayer': room.turn.value,
        'message': message,
    }


class RoomManager:
    def __init__(self, store: RoomStore, code_length: int = ROOM_CODE_LENGTH,
                 max_code_attempts: Optional[int] = 1000, logger: logging.Logger = None, rng=None):
        self.store = store
        self.code_length = code_length
        self.max_code_attempts = max_code_attempts
        self.logger = logger or logging.getLogger(__name__)
        self._rng = rng
        self.lock = threading.RLock()

    def room_count(self) -> int:
        with self.lock:
            return len(self.store)

    def room_of(self, sid: str) -> Optional[Room]:
        with self.lock:
            return self.store.find_by_participant(sid)

    def idle_since(self, code) -> Optional[float]:
        with self.lock:
            room = self.store.get(code)
            return room.idle_since if room else None

    def create_room(self, sid: str) -> Dispatch:
        with self.lock:
            if self.store.find_by_participant(sid):
                raise AlreadyInSession()
            code = generate_room_code(
                lambda c: c in self.store,
                length=self.code_length,
                max_attempts=self.max_code_attempts,
                rng=self._rng,
            )
            room = Room(code=code, player_x=sid, status=WAITING)
            room.mark_idle()
            self.store.insert(room)
            self.logger.info(f"[room-created] code={code} sid={sid}")
            return Dispatch(room_code=code).reply(sid, 'roomCreated', {
                'roomCode': code,
                'symbol': Marker.X.value,
            })

    def join_room(self, sid: str, code) -> Dispatch:
        with self.lock:
            if not isinstance(code, str) or len(code) != self.code_length:
                raise InvalidCode()
            room = self.store.get(normalize_code(code))
            if room is None:
                raise NotFound()
            if room.is_full:
                raise SessionFull()
            if self.store.find_by_participant(sid):
                raise AlreadyInSession()

            marker = room.free_marker()
            room.seat(sid, marker)
            self.store.bind(sid, room.code)
            room.restart()
            self.logger.info(f"[join] code={room.code} sid={sid} symbol={marker.value}")

            dispatch = Dispatch(room_code=room.code)
            dispatch.reply(sid, 'joinedRoom', {'roomCode': room.code, 'symbol': marker.value})
            dispatch.broadcast('gameStart', _game_start_payload(room, GAME_START_MESSAGE))
            return dispatch

    def make_move(self, sid: str, cell_index) -> Dispatch:
        with self.lock:
            room = self.store.find_by_participant(sid)
            if room is None:
                raise NotInSession()
            if not room.active:
                raise GameNotActive()
            marker = room.marker_for(sid)
            if marker is not room.turn:
                raise NotYourTurn()
            if isinstance(cell_index, bool) or not isinstance(cell_index, int):
                raise InvalidMove()
            if not 0 <= cell_index < len(room.board) or room.board[cell_index] is not None:
                raise InvalidMove()

            room.board[cell_index] = marker
            room.turn = marker.other
            self.logger.info(f"[move] code={room.code} sid={sid} symbol={marker.value} cell={cell_index}")

            outcome = evaluate(room.board)
            dispatch = Dispatch(room_code=room.code)
            if outcome.is_terminal:
                room.status = FINISHED
                if outcome.kind == DRAW:
                    winner, message = DRAW, DRAW_MESSAGE
                else:
                    winner, message = outcome.winner.value, f'{outcome.winner.value} wins!'
                self.logger.info(f"[game-end] code={room.code} result={winner}")
                return dispatch.broadcast('gameEnd', {
                    'board': serialize_board(room.board),
                    'winner': winner,
                    'message': message,
                    'line': list(outcome.line) if outcome.line else None,
                })
            return dispatch.broadcast('moveMade', {
                'board': serialize_board(room.board),
                'currentPlayer': room.turn.value,
                'lastMove': {'cellIndex': cell_index, 'symbol': marker.value},
            })

    def reset_game(self, sid: str) -> Dispatch:
        with self.lock:
            room = self.store.find_by_participant(sid)
            if room is None:
                raise NotInSession()
            if not room.is_full:
                raise InsufficientPlayers()
            room.restart()
            self.logger.info(f"[new-game] code={room.code} sid={sid}")
            return Dispatch(room_code=room.code).broadcast(
                'gameStart', _game_start_payload(room, NEW_GAME_MESSAGE)
            )

    def handle_disconnect(self, sid: str) -> Dispatch:
        with self.lock:
            room = self.store.find_by_participant(sid)
            if room is None:
                return Dispatch()
            room.unseat(sid)
            self.store.unbind(sid)
            room.status = ABANDONED
            self.logger.info(f"[disconnect] code={room.code} sid={sid} remaining={len(room.participants)}")

            dispatch = Dispatch(room_code=room.code)
            dispatch.broadcast('playerDisconnected', {'message': OPPONENT_LEFT_MESSAGE}, skip_sid=sid)
            if not room.participants:
                self.store.remove(room.code)
                dispatch.closed = True
                self.logger.info(f"[room-removed] code={room.code}")
            else:
                room.mark_idle()
            return dispatch

    def expire_room(self, code: str, idle_since: float) -> Dispatch:
        """Close a room still waiting alone since ``idle_since``.

        A room that filled up, emptied, or went idle again later is left as is.
        """
        with self.lock:
            room = self.store.get(code)
            if room is None or len(room.participants) != 1 or room.idle_since != idle_since:
                return Dispatch()
            dispatch = Dispatch(room_code=room.code)
            dispatch.broadcast('roomExpired', {'roomCode': room.code, 'message': ROOM_EXPIRED_MESSAGE})
            self.store.remove(room.code)
            dispatch.closed = True
            self.logger.info(f"[room-expired] code={room.code}")
            return dispatch
