import logging
import threading
import time
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from .intents import parse_intent
from .state import ClockRules, ClockState, apply_intent, apply_tick, initial_state


Snapshot = Dict[str, Any]
Listener = Callable[[Snapshot], None]


def _new_penalty_id() -> str:
    return uuid.uuid4().hex


class ClockCoordinator:
    """Owns the scoreboard clock state and serializes every change to it.

    Intents and ticks are applied under one lock, each as a single
    state -> state transition. After a commit the new snapshot is handed to
    every subscribed listener, outside the lock.

    The tick driver is a single background loop. It is (re)armed whenever
    the run flags change while the outer gate is open. Each loop carries the
    generation it was armed with and quits the first time it wakes up to a
    newer generation or a closed gate, so a pause always wins over a pending
    tick.

    ``spawn`` starts the driver loop (``socketio.start_background_task`` in
    the app); when it is None the coordinator never ticks on its own and
    callers drive it with :meth:`tick`.
    """

    def __init__(
        self,
        rules: Optional[ClockRules] = None,
        spawn: Optional[Callable[..., Any]] = None,
        sleep: Callable[[float], None] = time.sleep,
        tick_interval: float = 1.0,
        id_factory: Callable[[], str] = _new_penalty_id,
        clock: Callable[[], float] = time.time,
        monotonic: Callable[[], float] = time.monotonic,
        heartbeat_ticks: int = 0,
        logger: Optional[logging.Logger] = None,
    ):
        self.rules = rules or ClockRules()
        self.tick_interval = tick_interval
        self.heartbeat_ticks = heartbeat_ticks
        self.logger = logger or logging.getLogger(__name__)
        self._spawn = spawn
        self._sleep = sleep
        self._id_factory = id_factory
        self._clock = clock
        self._monotonic = monotonic
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []
        self._state = initial_state(self.rules)
        self._revision = 0
        self._generation = 0
        self._ticks = 0

    # ---- Reads ----

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> Snapshot:
        payload = self._state.to_dict()
        payload['revision'] = self._revision
        return payload

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self, snapshot: Snapshot) -> None:
        for listener in list(self._listeners):
            listener(snapshot)

    # ---- Commit / arming ----

    def _commit(self, new_state: ClockState) -> None:
        """Install ``new_state`` and re-arm the driver if the run flags moved.

        Must be called with the lock held.
        """
        prev = self._state
        self._state = new_state
        self._revision += 1
        if prev.run_flags == new_state.run_flags:
            return
        self._generation += 1
        if new_state.gate_open:
            self._arm()
        else:
            self.logger.info(f"[clock-disarm] generation={self._generation}")

    def _arm(self) -> None:
        if self._spawn is None:
            return
        game_running, shot_running, timeout_active = self._state.run_flags
        self.logger.info(
            f"[clock-arm] generation={self._generation} game={game_running} "
            f"shot={shot_running} timeout={timeout_active}"
        )
        self._spawn(self._run_driver, self._generation)

    def _run_driver(self, generation: int) -> None:
        # Sleep to fixed deadlines so tick work does not push the cadence back
        deadline = self._monotonic()
        while True:
            deadline += self.tick_interval
            self._sleep(max(0.0, deadline - self._monotonic()))
            with self._lock:
                if generation != self._generation or not self._state.gate_open:
                    self.logger.info(
                        f"[tick-discard] generation={generation} current={self._generation}"
                    )
                    return
                self._apply_tick()
                snapshot = self._snapshot()
            self._notify(snapshot)

    def _apply_tick(self) -> None:
        new_state = apply_tick(self._state)
        if new_state is self._state:
            return
        self._commit(new_state)
        self._ticks += 1
        if self.heartbeat_ticks and self._ticks % self.heartbeat_ticks == 0:
            s = self._state
            self.logger.info(
                f"[tick-heartbeat] revision={self._revision} game={s.game_time} "
                f"shot={s.shot_clock} timeout={s.timeout_time} penalties={len(s.penalties)}"
            )

    # ---- Tick ----

    def tick(self) -> Snapshot:
        """Apply one tick immediately, ignoring the driver's timing."""
        with self._lock:
            self._apply_tick()
            snapshot = self._snapshot()
        self._notify(snapshot)
        return snapshot

    # ---- Intents ----

    def submit(self, name: str, params: Optional[Dict[str, Any]] = None) -> Tuple[bool, Snapshot]:
        """Validate and apply an intent in one step.

        Returns ``(applied, snapshot)``. ``applied`` is False when the
        intent was a no-op (a timeout that is not available), decided under
        the same lock that produced the snapshot.

        Raises :class:`IntentError` for unknown intents or bad parameters,
        before the state is touched.
        """
        kwargs = parse_intent(name, params)
        with self._lock:
            if name == 'add_penalty':
                kwargs['penalty_id'] = self._id_factory()
                kwargs['created_at'] = self._clock()
            new_state = apply_intent(self._state, name, **kwargs)
            if new_state is self._state:
                self.logger.info(f"[intent-noop] {name} {kwargs}")
                return False, self._snapshot()
            self._commit(new_state)
            self.logger.info(f"[intent] {name} {kwargs} revision={self._revision}")
            snapshot = self._snapshot()
        self._notify(snapshot)
        return True, snapshot

    def dispatch(self, name: str, **params) -> Snapshot:
        return self.submit(name, params)[1]

    def toggle_game_clock(self) -> Snapshot:
        return self.dispatch('toggle_game_clock')

    def reset_shot_clock(self) -> Snapshot:
        return self.dispatch('reset_shot_clock')

    def call_timeout(self, team: str) -> Snapshot:
        return self.dispatch('call_timeout', team=team)

    def adjust_score(self, team: str, delta: int) -> Snapshot:
        return self.dispatch('adjust_score', team=team, delta=delta)

    def add_penalty(self, team: str, duration: int) -> Snapshot:
        return self.dispatch('add_penalty', team=team, duration=duration)

    def adjust_game_time(self, seconds: int) -> Snapshot:
        return self.dispatch('adjust_game_time', seconds=seconds)

    def reset(self) -> Snapshot:
        """Start a new game: fresh state from the rules, driver disarmed."""
        with self._lock:
            self._commit(initial_state(self.rules))
            self.logger.info(f"[clock-reset] revision={self._revision}")
            snapshot = self._snapshot()
        self._notify(snapshot)
        return snapshot
