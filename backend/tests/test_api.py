import os


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'scoreboard' in res.get_json()['message']


def test_initial_state(client):
    res = client.get('/api/clock/state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['game_time'] == 480
    assert state['game_time_display'] == '8:00'
    assert state['shot_clock'] == 30
    assert state['game_running'] is False
    assert state['shot_running'] is False
    assert state['timeouts'] == {'home': 4, 'away': 4}
    assert state['penalties'] == []
    assert state['revision'] == 0


def test_toggle_and_tick(client, coordinator):
    state = client.post('/api/clock/game/toggle').get_json()
    assert state['game_running'] and state['shot_running']
    for _ in range(5):
        coordinator.tick()
    state = client.get('/api/clock/state').get_json()
    assert (state['game_time'], state['shot_clock']) == (475, 25)

    state = client.post('/api/clock/shot/reset').get_json()
    assert state['shot_clock'] == 30 and state['shot_running']
    coordinator.tick()
    state = client.get('/api/clock/state').get_json()
    assert (state['game_time'], state['shot_clock']) == (474, 29)


def test_timeout_flow(client, coordinator):
    client.post('/api/clock/game/toggle')
    res = client.post('/api/clock/timeout', json={'team': 'home'})
    assert res.status_code == 200
    state = res.get_json()
    assert state['timeouts']['home'] == 3
    assert state['timeout_active'] and state['timeout_time'] == 90
    assert not state['game_running'] and not state['shot_running']
    assert state['can_call_timeout'] == {'home': False, 'away': False}

    res = client.post('/api/clock/timeout', json={'team': 'away'})
    assert res.status_code == 409
    assert client.get('/api/clock/state').get_json()['timeouts']['away'] == 4

    for _ in range(90):
        coordinator.tick()
    state = client.get('/api/clock/state').get_json()
    assert not state['timeout_active'] and state['timeout_time'] == 0


def test_toggle_cancels_timeout(client, coordinator):
    client.post('/api/clock/timeout', json={'team': 'away'})
    coordinator.tick()
    state = client.post('/api/clock/game/toggle').get_json()
    assert state['timeout_active'] is False
    assert state['timeout_time'] == 0
    assert state['game_running'] is True


def test_timeout_allowance_exhausted(client):
    for _ in range(4):
        client.post('/api/clock/timeout', json={'team': 'home'})
        client.post('/api/clock/game/toggle')
    res = client.post('/api/clock/timeout', json={'team': 'home'})
    assert res.status_code == 409
    state = client.get('/api/clock/state').get_json()
    assert state['timeouts']['home'] == 0
    assert state['can_call_timeout']['home'] is False


def test_timeout_requires_valid_team(client):
    res = client.post('/api/clock/timeout', json={'team': 'visitors'})
    assert res.status_code == 400
    assert 'error' in res.get_json()


def test_score_clamps(client):
    client.post('/api/clock/score', json={'team': 'home', 'delta': 1})
    state = client.post('/api/clock/score', json={'team': 'home', 'delta': -3}).get_json()
    assert state['score']['home'] == 0
    state = client.post('/api/clock/score', json={'team': 'away', 'delta': 2}).get_json()
    assert state['score'] == {'home': 0, 'away': 2}


def test_score_rejects_bad_delta(client):
    res = client.post('/api/clock/score', json={'team': 'home', 'delta': 'lots'})
    assert res.status_code == 400


def test_penalty_lifecycle(client, coordinator):
    res = client.post('/api/clock/penalties', json={'team': 'away', 'duration': 30})
    assert res.status_code == 201
    penalty = res.get_json()['penalties'][0]
    assert penalty['team'] == 'away'
    assert penalty['remaining'] == 30 and penalty['duration'] == 30
    assert penalty['remaining_display'] == '0:30'

    # Clock stopped: penalty holds
    for _ in range(30):
        coordinator.tick()
    assert client.get('/api/clock/state').get_json()['penalties'][0]['remaining'] == 30

    client.post('/api/clock/game/toggle')
    for _ in range(30):
        coordinator.tick()
    assert client.get('/api/clock/state').get_json()['penalties'] == []


def test_penalty_requires_positive_duration(client):
    res = client.post('/api/clock/penalties', json={'team': 'home', 'duration': -30})
    assert res.status_code == 400


def test_adjust_game_time(client):
    state = client.post('/api/clock/game/adjust', json={'seconds': 10}).get_json()
    assert state['game_time'] == 490
    state = client.post('/api/clock/game/adjust', json={'seconds': -500}).get_json()
    assert state['game_time'] == 0
    res = client.post('/api/clock/game/adjust', json={})
    assert res.status_code == 400


def test_reset(client):
    client.post('/api/clock/game/toggle')
    client.post('/api/clock/score', json={'team': 'away', 'delta': 5})
    state = client.post('/api/clock/reset').get_json()
    assert state['game_running'] is False
    assert state['score'] == {'home': 0, 'away': 0}
    assert state['game_time'] == 480


def test_toggle_debounce(flask_app, client):
    from scoreboard.api import clock as clock_api
    clock_api._last_controller_action.clear()
    flask_app.config['CONTROLLER_DEBOUNCE_MS'] = 60000
    try:
        first = client.post('/api/clock/game/toggle')
        second = client.post('/api/clock/game/toggle')
    finally:
        flask_app.config['CONTROLLER_DEBOUNCE_MS'] = 0
        clock_api._last_controller_action.clear()
    assert first.status_code == 200
    assert second.status_code == 202
    assert client.get('/api/clock/state').get_json()['game_running'] is True


def test_clock_simulate_command(flask_app):
    import json
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['clock-simulate', '--start', '--ticks', '5'])
    assert result.exit_code == 0
    state = json.loads(result.output)
    assert (state['game_time'], state['shot_clock']) == (475, 25)

    result = runner.invoke(args=['clock-simulate', '--timeout', 'home', '--ticks', '90'])
    state = json.loads(result.output)
    assert state['timeouts']['home'] == 3
    assert state['timeout_active'] is False


def test_timeout_rejection_comes_from_the_same_commit(client, coordinator):
    # another controller calls a timeout first
    coordinator.call_timeout('home')
    res = client.post('/api/clock/timeout', json={'team': 'away'})
    assert res.status_code == 409
    body = res.get_json()
    assert body['error'] == 'Timeout not available'
    assert body['state']['timeouts'] == {'home': 3, 'away': 4}
    assert body['state']['revision'] == 1


def test_fractional_game_time_rejected(client):
    res = client.post('/api/clock/game/adjust', json={'seconds': 1.5})
    assert res.status_code == 400
    assert client.get('/api/clock/state').get_json()['game_time'] == 480


def test_only_config_is_installed_as_top_level_module():
    pyproject = os.path.join(os.path.dirname(__file__), '..', '..', 'pyproject.toml')
    with open(pyproject) as fh:
        lines = [line.strip() for line in fh if line.strip().startswith('py-modules')]
    assert lines == ['py-modules = ["config"]']
