"""Scoreboard clock domain: state transitions and the clock coordinator.

Nothing in here knows about HTTP or Socket.IO. Routes and socket handlers
hand raw client input to ``ClockCoordinator.submit``, which checks it with
``parse_intent`` before touching the state.
"""

from .coordinator import ClockCoordinator
from .intents import IntentError, parse_intent
from .state import AWAY, HOME, TEAMS, ClockRules, ClockState, Penalty

__all__ = [
    'AWAY',
    'HOME',
    'TEAMS',
    'ClockCoordinator',
    'ClockRules',
    'ClockState',
    'IntentError',
    'Penalty',
    'parse_intent',
]
