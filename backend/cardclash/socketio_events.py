from flask import current_app, request


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _coordinator():
    return current_app.extensions['cardclash']


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
    _coordinator().disconnect(sid)


def handle_join_game(data=None):
    _coordinator().join_game(_get_sid(), data)


def handle_start_game(data=None):
    _coordinator().start_game(_get_sid())


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    from cardclash import socketio

    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('joinGame', handle_join_game, namespace=namespace)
    socketio.on_event('startGame', handle_start_game, namespace=namespace)
