"""Errors raised by the room lifecycle.

Every error is recoverable and reported only to the connection that made the
request; the socket handlers turn them into an ``error`` event.
"""


class RoomError(Exception):
    code = 'RoomError'
    message = 'Something went wrong.'

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'message': self.message, 'code': self.code}


class AlreadyInSession(RoomError):
    code = 'AlreadyInSession'
    message = 'You are already in a room.'


class InvalidCode(RoomError):
    code = 'InvalidCode'
    message = 'Invalid room code.'


class NotFound(RoomError):
    code = 'NotFound'
    message = 'Room not found.'


class SessionFull(RoomError):
    code = 'SessionFull'
    message = 'Room is full.'


class NotInSession(RoomError):
    code = 'NotInSession'
    message = 'You are not in a room.'


class GameNotActive(RoomError):
    code = 'GameNotActive'
    message = 'The game is not active.'


class NotYourTurn(RoomError):
    code = 'NotYourTurn'
    message = 'It is not your turn.'


class InvalidMove(RoomError):
    code = 'InvalidMove'
    message = 'Invalid move.'


class InsufficientPlayers(RoomError):
    code = 'InsufficientPlayers'
    message = 'Two players are needed to start.'


class ResourceExhausted(RoomError):
    code = 'ResourceExhausted'
    message = 'No room code available, try again.'
