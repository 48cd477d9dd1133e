from flask import Blueprint, jsonify, request, current_app
from scoreboard import get_coordinator
from scoreboard.services.clock import IntentError
import time


clock = Blueprint('clock', __name__)

_last_controller_action: dict[str, float] = {}


def _apply(name, params=None, status=200, rejected='Intent not available'):
    try:
        applied, snapshot = get_coordinator().submit(name, params)
    except IntentError as exc:
        return jsonify({'error': str(exc)}), 400
    if not applied:
        return jsonify({'error': rejected, 'state': snapshot}), 409
    return jsonify(snapshot), status


def _debounced(action: str) -> bool:
    try:
        debounce_ms = int(current_app.config.get('CONTROLLER_DEBOUNCE_MS', 0))
    except (TypeError, ValueError):
        debounce_ms = 0
    if debounce_ms <= 0:
        return False
    now = time.time() * 1000.0
    last = _last_controller_action.get(action, 0)
    if now - last < debounce_ms:
        return True
    _last_controller_action[action] = now
    return False


@clock.route('/state', methods=['GET'])
def get_clock_state():
    return jsonify(get_coordinator().snapshot())


@clock.route('/game/toggle', methods=['POST'])
def toggle_game_clock():
    # A double press on start/pause would otherwise cancel itself out
    if _debounced('toggle_game_clock'):
        return jsonify({'message': 'debounced'}), 202
    return _apply('toggle_game_clock')


@clock.route('/game/adjust', methods=['POST'])
def adjust_game_time():
    data = request.get_json(silent=True) or {}
    return _apply('adjust_game_time', data)


@clock.route('/shot/reset', methods=['POST'])
def reset_shot_clock():
    return _apply('reset_shot_clock')


@clock.route('/timeout', methods=['POST'])
def call_timeout():
    data = request.get_json(silent=True) or {}
    return _apply('call_timeout', data, rejected='Timeout not available')


@clock.route('/score', methods=['POST'])
def adjust_score():
    data = request.get_json(silent=True) or {}
    return _apply('adjust_score', data)


@clock.route('/penalties', methods=['POST'])
def add_penalty():
    data = request.get_json(silent=True) or {}
    return _apply('add_penalty', data, status=201)


@clock.route('/reset', methods=['POST'])
def reset_clock():
    return jsonify(get_coordinator().reset())
