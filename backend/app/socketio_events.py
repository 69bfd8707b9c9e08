from flask_socketio import join_room, emit
from flask import current_app, request
from app import socketio
from app.services.games import Dispatch, RoomError, RoomManager
from app.services.games.scheduler import schedule_room_expiry


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _manager() -> RoomManager:
    return current_app.extensions['rooms']


def _namespace() -> str:
    return current_app.config.get('SOCKETIO_NAMESPACE', '/')


def deliver(dispatch: Dispatch) -> None:
    """Emit every message of a dispatch and drop closed rooms.

    Uses socketio.emit since this may be called from a background task.
    """
    namespace = _namespace()
    for msg in dispatch.messages:
        socketio.emit(msg.event, msg.payload, to=msg.to, skip_sid=msg.skip_sid, namespace=namespace)
    if dispatch.closed and dispatch.room_code:
        socketio.close_room(dispatch.room_code, namespace=namespace)


def _report(exc: RoomError) -> None:
    current_app.logger.info(f"[room-error] sid={_get_sid()} code={exc.code}")
    emit('error', exc.to_dict())


def handle_connect(auth=None):
    current_app.logger.info(f"[socket-connect] sid={_get_sid()}")


def handle_disconnect(*args):
    sid = _get_sid()
    current_app.logger.info(f"[socket-disconnect] sid={sid}")
    manager = _manager()
    with manager.lock:
        dispatch = manager.handle_disconnect(sid)
        deliver(dispatch)
    if dispatch.room_code and not dispatch.closed:
        schedule_room_expiry(current_app._get_current_object(), dispatch.room_code)


# Handlers emit while holding the manager lock so broadcasts for a room go
# out in the order its state changed.

def handle_create_room(data=None):
    sid = _get_sid()
    manager = _manager()
    with manager.lock:
        try:
            dispatch = manager.create_room(sid)
        except RoomError as exc:
            _report(exc)
            return
        join_room(dispatch.room_code)
        deliver(dispatch)
    schedule_room_expiry(current_app._get_current_object(), dispatch.room_code)


def handle_join_room(data=None):
    sid = _get_sid()
    code = data.get('roomCode') if isinstance(data, dict) else None
    manager = _manager()
    with manager.lock:
        try:
            dispatch = manager.join_room(sid, code)
        except RoomError as exc:
            _report(exc)
            return
        # Join the Socket.IO room before the broadcast so the joiner receives gameStart
        join_room(dispatch.room_code)
        deliver(dispatch)


def handle_make_move(data=None):
    sid = _get_sid()
    cell_index = data.get('cellIndex') if isinstance(data, dict) else None
    manager = _manager()
    with manager.lock:
        try:
            dispatch = manager.make_move(sid, cell_index)
        except RoomError as exc:
            _report(exc)
            return
        deliver(dispatch)


def handle_new_game(data=None):
    manager = _manager()
    with manager.lock:
        try:
            dispatch = manager.reset_game(_get_sid())
        except RoomError as exc:
            _report(exc)
            return
        deliver(dispatch)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace.

    createRoom/joinRoom are aliases of createSession/joinSession kept for
    existing browser clients.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createSession', handle_create_room, namespace=namespace)
    socketio.on_event('createRoom', handle_create_room, namespace=namespace)
    socketio.on_event('joinSession', handle_join_room, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('makeMove', handle_make_move, namespace=namespace)
    socketio.on_event('newGame', handle_new_game, namespace=namespace)
