from flask_socketio import join_room, leave_room, emit
from scoreboard import socketio, get_coordinator, SCOREBOARD_ROOM
from scoreboard.services.clock import IntentError


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})
    emit('state_update', get_coordinator().snapshot())


def handle_join_scoreboard(data=None):
    join_room(SCOREBOARD_ROOM)
    emit('joined', {'room': SCOREBOARD_ROOM})


def handle_leave_scoreboard(data=None):
    leave_room(SCOREBOARD_ROOM)
    emit('left', {'room': SCOREBOARD_ROOM})


def handle_get_state(data=None):
    emit('state_update', get_coordinator().snapshot())


def handle_intent(data):
    """Apply a client intent: ``{'name': ..., 'params': {...}}``.

    The committed snapshot reaches the room through the coordinator's
    broadcast listener, so the sender only hears back on errors.
    """
    name = (data or {}).get('name')
    params = (data or {}).get('params') or {}
    try:
        applied, _ = get_coordinator().submit(name, params)
    except IntentError as exc:
        emit('error', {'message': str(exc)})
        return
    if not applied:
        emit('error', {'message': f'{name} not available'})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'join_scoreboard': handle_join_scoreboard,
        'leave_scoreboard': handle_leave_scoreboard,
        'get_state': handle_get_state,
        'intent': handle_intent,
        'ping': handle_ping,
    }
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace=namespace)
