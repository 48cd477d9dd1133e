import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Clock lengths (seconds)
    GAME_DURATION_SEC = int(os.environ.get('GAME_DURATION_SEC', '480'))
    SHOT_CLOCK_SEC = int(os.environ.get('SHOT_CLOCK_SEC', '30'))
    TIMEOUT_DURATION_SEC = int(os.environ.get('TIMEOUT_DURATION_SEC', '90'))
    TIMEOUTS_PER_TEAM = int(os.environ.get('TIMEOUTS_PER_TEAM', '4'))
    # Tick driver period (seconds)
    TICK_INTERVAL_SEC = float(os.environ.get('TICK_INTERVAL_SEC', '1.0'))
    # Optional: debounce the game clock start/pause button (ms). 0 disables.
    CONTROLLER_DEBOUNCE_MS = int(os.environ.get('CONTROLLER_DEBOUNCE_MS', '0'))
    # Optional: heartbeat interval for tick driver logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
