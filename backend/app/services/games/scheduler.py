from typing import Set, Tuple

_scheduled_expiry_keys: Set[Tuple[str, float]] = set()


def schedule_room_expiry(app, code: str) -> None:
    """Close the room if it is still waiting alone after ROOM_IDLE_TIMEOUT_SEC.

    - No-ops when the timeout is 0 (the default) or in TESTING mode
    - Ensures a single timer per (code, idle_since)
    - The room is only closed if nobody joined or left in the meantime
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return
    try:
        timeout = float(app.config.get('ROOM_IDLE_TIMEOUT_SEC', 0))
    except (TypeError, ValueError):
        timeout = 0
    if timeout <= 0:
        return

    from app import socketio
    from app.socketio_events import deliver

    manager = app.extensions['rooms']
    idle_since = manager.idle_since(code)
    if idle_since is None:
        return
    key = (code, idle_since)
    if key in _scheduled_expiry_keys:
        app.logger.info(f"[timer-skip] code={code} already scheduled")
        return
    _scheduled_expiry_keys.add(key)
    app.logger.info(f"[timer-set] code={code} timeout={timeout}s")

    def _worker(room_code: str, idle_since: float, delay: float):
        socketio.sleep(delay)
        _scheduled_expiry_keys.discard((room_code, idle_since))
        with app.app_context():
            with manager.lock:
                dispatch = manager.expire_room(room_code, idle_since)
                if not dispatch.messages:
                    app.logger.info(f"[timer-abort] code={room_code} no longer idle")
                    return
                deliver(dispatch)

    socketio.start_background_task(_worker, code, idle_since, timeout)
