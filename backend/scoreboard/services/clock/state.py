from dataclasses import dataclass, field, replace
from typing import Dict, Tuple

HOME = 'home'
AWAY = 'away'
TEAMS = (HOME, AWAY)

SHOT_CLOCK_WARNING_SEC = 10


def format_clock(seconds: int) -> str:
    """Render seconds as m:ss, the way the scoreboard face shows them."""
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins}:{secs:02d}"


@dataclass(frozen=True)
class ClockRules:
    game_length: int = 480
    shot_clock_length: int = 30
    timeout_length: int = 90
    timeouts_per_team: int = 4


@dataclass(frozen=True)
class Penalty:
    id: str
    team: str
    duration: int
    remaining: int
    created_at: float = 0.0

    def to_dict(self):
        return {
            'id': self.id,
            'team': self.team,
            'duration': self.duration,
            'remaining': self.remaining,
            'remaining_display': format_clock(self.remaining),
            'created_at': self.created_at,
        }


@dataclass(frozen=True)
class ClockState:
    """One committed snapshot of every clock, score and allowance.

    Instances are never mutated; transitions return a new state.
    """
    rules: ClockRules = field(default_factory=ClockRules)
    game_time: int = 480
    game_running: bool = False
    shot_clock: int = 30
    shot_running: bool = False
    timeout_time: int = 0
    timeout_active: bool = False
    score: Dict[str, int] = field(default_factory=lambda: {HOME: 0, AWAY: 0})
    timeouts: Dict[str, int] = field(default_factory=lambda: {HOME: 4, AWAY: 4})
    penalties: Tuple[Penalty, ...] = ()

    @property
    def gate_open(self) -> bool:
        # The tick driver only fires while one of these holds
        return self.game_running or self.timeout_active

    @property
    def run_flags(self) -> Tuple[bool, bool, bool]:
        return (self.game_running, self.shot_running, self.timeout_active)

    def can_call_timeout(self, team: str) -> bool:
        return self.timeouts.get(team, 0) > 0 and not self.timeout_active

    def to_dict(self):
        return {
            'game_time': self.game_time,
            'game_time_display': format_clock(self.game_time),
            'game_running': self.game_running,
            'shot_clock': self.shot_clock,
            'shot_running': self.shot_running,
            'shot_clock_warning': self.shot_clock <= SHOT_CLOCK_WARNING_SEC,
            'score': dict(self.score),
            'timeouts': dict(self.timeouts),
            'timeout_active': self.timeout_active,
            'timeout_time': self.timeout_time,
            'timeout_time_display': format_clock(self.timeout_time),
            'can_call_timeout': {team: self.can_call_timeout(team) for team in TEAMS},
            'penalties': [p.to_dict() for p in self.penalties],
        }


def initial_state(rules: ClockRules = None) -> ClockState:
    rules = rules or ClockRules()
    return ClockState(
        rules=rules,
        game_time=rules.game_length,
        shot_clock=rules.shot_clock_length,
        timeouts={team: rules.timeouts_per_team for team in TEAMS},
    )


def _check_team(team: str) -> None:
    if team not in TEAMS:
        raise ValueError(f"unknown team: {team!r}")


# ---- Tick ----

def apply_tick(state: ClockState) -> ClockState:
    """Advance every active countdown by one second.

    All four branches read from ``state`` only, never from each other's
    results, so a single tick is one consistent transition.
    """
    changes = {}

    if state.game_running:
        changes['game_time'] = max(0, state.game_time - 1)

        if state.shot_running:
            if state.shot_clock <= 1:
                changes['shot_clock'] = 0
                changes['shot_running'] = False
            else:
                changes['shot_clock'] = state.shot_clock - 1

        ticked = (
            replace(p, remaining=p.remaining - 1) if p.remaining > 0 else p
            for p in state.penalties
        )
        changes['penalties'] = tuple(p for p in ticked if p.remaining > 0)

    if state.timeout_active:
        if state.timeout_time <= 1:
            changes['timeout_time'] = 0
            changes['timeout_active'] = False
        else:
            changes['timeout_time'] = state.timeout_time - 1

    if not changes:
        return state
    return replace(state, **changes)


# ---- Intents ----

def toggle_game_clock(state: ClockState) -> ClockState:
    running = not state.game_running
    changes = {
        'game_running': running,
        # The shot clock starts and stops with the game clock
        'shot_running': running,
    }
    if state.timeout_active:
        changes['timeout_active'] = False
        changes['timeout_time'] = 0
    return replace(state, **changes)


def reset_shot_clock(state: ClockState) -> ClockState:
    # A timeout freezes the shot clock; it restarts with the game clock
    return replace(
        state,
        shot_clock=state.rules.shot_clock_length,
        shot_running=not state.timeout_active,
    )


def call_timeout(state: ClockState, team: str) -> ClockState:
    """Stop play and start the timeout clock.

    Returns ``state`` itself (no transition) when the team has no timeouts
    left or a timeout is already running.
    """
    _check_team(team)
    if not state.can_call_timeout(team):
        return state
    timeouts = dict(state.timeouts)
    timeouts[team] -= 1
    return replace(
        state,
        timeouts=timeouts,
        game_running=False,
        shot_running=False,
        timeout_time=state.rules.timeout_length,
        timeout_active=True,
    )


def adjust_score(state: ClockState, team: str, delta: int) -> ClockState:
    _check_team(team)
    score = dict(state.score)
    score[team] = max(0, score[team] + delta)
    return replace(state, score=score)


def add_penalty(state: ClockState, team: str, duration: int, penalty_id: str,
                created_at: float = 0.0) -> ClockState:
    _check_team(team)
    if duration <= 0:
        raise ValueError('penalty duration must be positive')
    penalty = Penalty(
        id=penalty_id,
        team=team,
        duration=duration,
        remaining=duration,
        created_at=created_at,
    )
    return replace(state, penalties=state.penalties + (penalty,))


def adjust_game_time(state: ClockState, seconds: int) -> ClockState:
    return replace(state, game_time=max(0, state.game_time + seconds))


INTENTS = {
    'toggle_game_clock': toggle_game_clock,
    'reset_shot_clock': reset_shot_clock,
    'call_timeout': call_timeout,
    'adjust_score': adjust_score,
    'add_penalty': add_penalty,
    'adjust_game_time': adjust_game_time,
}


def apply_intent(state: ClockState, name: str, **params) -> ClockState:
    try:
        handler = INTENTS[name]
    except KeyError:
        raise ValueError(f"unknown intent: {name!r}") from None
    return handler(state, **params)
