# Folder: copycat/
# File: copycat.py
"""
The engine: owns the RandGen, Temperature, Slipnet, Coderack and Workspace,
drives the tick loop and exposes the run-control state machine.
"""
import re
import copy
import time
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from tqdm import tqdm

from copycat.config import CONFIG
from copycat.emergent.coderack import Coderack
from copycat.emergent.slipnet import Slipnet
from copycat.rand_gen import RandGen
from copycat.reporter import Reporter
from copycat.temperature import Temperature
from copycat.workspace import StructureKind, Workspace

logger = logging.getLogger(__name__)

UPDATE_INTERVAL = 5   # Ticks between global updates
LETTERS_ONLY = re.compile(r'[a-z]+', re.ASCII | re.IGNORECASE)

BatchKey = Tuple[Optional[str], Optional[str]]


class RunState(Enum):
    READY = 'ready'
    RUNNING = 'running'
    PAUSED = 'paused'
    DONE = 'done'


class InvalidInputError(ValueError):
    """Raised when a problem string is empty or holds anything but letters."""


def validate_strings(*strings: str):
    """
    Raises:
        InvalidInputError: If any string is empty or contains a non-letter.
    """
    for s in strings:
        if not isinstance(s, str) or not LETTERS_ONLY.fullmatch(s):
            raise InvalidInputError(f"Input strings must be non-empty and contain only letters, got {s!r}")


class Copycat:
    """
    Solves letter-string analogies (abc : abd :: xyz : ?).

    Example:
        engine = Copycat(seed=42)
        engine.set_strings('abc', 'abd', 'ijk')
        answer = engine.run()   # usually 'ijl'
    """

    def __init__(self, seed: Union[int, str, None] = None, reporter=None,
                 config: Optional[Dict[str, Any]] = None):
        """
        Args:
            seed (int | str | None): RandGen seed; falls back to config run.seed, then the clock.
            reporter: Object with info/warn/error methods. Defaults to a logging Reporter.
            config (Dict[str, Any]): Configuration as returned by load_config.
        """
        self.config = copy.deepcopy(CONFIG) if config is None else config
        run_cfg = self.config['run']
        if seed is None:
            seed = run_cfg.get('seed')

        self.rand_gen = RandGen(seed)
        self.temperature = Temperature(self.config['temperature']['initial_clamp_time'])
        self.slipnet = Slipnet()
        self.reporter = reporter or Reporter()
        self.coderack = Coderack(self, self.config['coderack']['max_codelets'])
        self.workspace = Workspace(self)

        self.unclamp_time = self.config['slipnet']['unclamp_time']
        self.step_delay = max(0.0, float(run_cfg.get('step_delay') or 0.0))
        self.max_ticks: Optional[int] = run_cfg.get('max_ticks')
        self.listeners: List[Callable[[str], None]] = []
        self._completion_callback: Optional[Callable[[], None]] = None
        self.state = RunState.READY

    def __repr__(self):
        return f"<Copycat: {self.workspace!r} [{self.state.value}]>"

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------
    def set_strings(self, initial: str, modified: str, target: str) -> bool:
        """Installs a new problem. Rejected while running or on invalid input."""
        if self.state is RunState.RUNNING:
            self.reporter.warn(f"set_strings request ignored - Copycat is in {self.state.value} state")
            return False
        try:
            validate_strings(initial, modified, target)
        except InvalidInputError as e:
            self.reporter.warn(f"set_strings request ignored - {e}")
            return False
        self.workspace.reset(initial.lower(), modified.lower(), target.lower())
        self.reset()
        return True

    def set_rand_seed(self, seed: Union[int, str, None]):
        self.rand_gen = RandGen(seed)

    def set_step_delay(self, seconds: float):
        self.step_delay = max(0.0, seconds)

    def add_listener(self, listener: Callable[[str], None]):
        """Registers a callable invoked with the state name after every tick and state change."""
        self.listeners.append(listener)

    # ------------------------------------------------------------------
    # Run control
    # ------------------------------------------------------------------
    def start(self, callback: Optional[Callable[[], None]] = None):
        """Resets and runs until an answer is found, the run is paused or max_ticks is hit."""
        if self.state not in (RunState.READY, RunState.DONE):
            self.reporter.warn(f"start request ignored - Copycat is in {self.state.value} state")
            return
        self._completion_callback = callback
        self.reset()
        self._set_state(RunState.RUNNING)
        self._run_loop()

    def pause(self):
        if self.state is not RunState.RUNNING:
            self.reporter.warn(f"pause request ignored - Copycat is in {self.state.value} state")
            return
        self._set_state(RunState.PAUSED)

    def resume(self):
        if self.state is not RunState.PAUSED:
            self.reporter.warn(f"resume request ignored - Copycat is in {self.state.value} state")
            return
        self._set_state(RunState.RUNNING)
        self._run_loop()

    def single_step(self):
        if self.state not in (RunState.READY, RunState.PAUSED):
            self.reporter.warn(f"single_step request ignored - Copycat is in {self.state.value} state")
            return
        if self.state is not RunState.PAUSED:
            self._set_state(RunState.PAUSED)
        self._run_next_codelet()

    def reset(self):
        """Clears the coderack, slipnet, temperature and workspace structures."""
        self.coderack.reset()
        self.slipnet.reset()
        self.temperature.reset()
        self.workspace.reset()
        self._set_state(RunState.READY)

    def run(self, max_ticks: Optional[int] = None) -> Optional[str]:
        """
        Convenience wrapper around start().
        Args:
            max_ticks (int): Overrides the configured tick limit for this run.
        Returns:
            Optional[str]: The answer, or None if the tick limit was reached first.
        """
        if max_ticks is not None:
            self.max_ticks = max_ticks
        if self.state is RunState.PAUSED:
            self.reset()
        self.start()
        return self.workspace.final_answer

    def _run_loop(self):
        while self.state is RunState.RUNNING:
            self._run_next_codelet()
            if self.state is RunState.RUNNING and self.step_delay > 0:
                time.sleep(self.step_delay)

    def _run_next_codelet(self):
        self.step()
        self._notify_listeners()

        if self.workspace.final_answer:
            self._set_state(RunState.DONE)
            logger.info(f"{self.workspace!r} answered '{self.workspace.final_answer}' "
                        f"after {self.coderack.num_codelets_run} codelets")
            if self._completion_callback is not None:
                callback, self._completion_callback = self._completion_callback, None
                callback()
        elif (self.state is RunState.RUNNING and self.max_ticks is not None
              and self.coderack.num_codelets_run >= self.max_ticks):
            logger.info(f"Tick limit {self.max_ticks} reached without an answer")
            self._set_state(RunState.PAUSED)

    def step(self):
        """Runs one tick: a global update every few ticks, then one codelet."""
        current_time = self.coderack.num_codelets_run
        self.temperature.try_unclamp(current_time)
        if current_time % UPDATE_INTERVAL == 0:
            self.workspace.update_everything()
            self.coderack.update_codelets()
            self.slipnet.update(self.rand_gen, current_time == self.unclamp_time)
            self.temperature.set(self.workspace.calc_temperature())
        self.coderack.choose_and_run_codelet()

    def _set_state(self, state: RunState):
        self.state = state
        self._notify_listeners()

    def _notify_listeners(self):
        for listener in list(self.listeners):
            listener(self.state.value)

    # ------------------------------------------------------------------
    # Batch mode
    # ------------------------------------------------------------------
    def batch_run(self, initial: str, modified: str, target: str, num_iterations: int,
                  show_progress: bool = True) -> Dict[BatchKey, Dict[str, float]]:
        """
        Solves the same problem num_iterations times.
        Returns:
            Dict keyed by (answer, rule synopsis) with count, avg_temp and avg_time
            (average codelets run). Empty if the input is rejected.
        """
        if self.state is RunState.RUNNING:
            self.reporter.warn(f"batch_run request ignored - Copycat is in {self.state.value} state")
            return {}
        try:
            validate_strings(initial, modified, target)
        except InvalidInputError as e:
            self.reporter.warn(f"batch_run request ignored - {e}")
            return {}

        totals: Dict[BatchKey, Dict[str, float]] = {}
        for _ in tqdm(range(num_iterations), desc="Batch runs", disable=not show_progress):
            self.coderack.reset()
            self.slipnet.reset()
            self.temperature.reset()
            self.workspace.reset(initial.lower(), modified.lower(), target.lower())
            while not self.workspace.final_answer:
                if self.max_ticks is not None and self.coderack.num_codelets_run >= self.max_ticks:
                    break
                self.step()

            rule = self.workspace.rule
            key = (self.workspace.final_answer, rule.synopsis() if rule else None)
            entry = totals.setdefault(key, {'count': 0, 'sum_temp': 0.0, 'sum_time': 0.0})
            entry['count'] += 1
            entry['sum_temp'] += self.temperature.last_unclamped_value
            entry['sum_time'] += self.coderack.num_codelets_run

        results = {
            key: {'count': e['count'], 'avg_temp': e['sum_temp'] / e['count'], 'avg_time': e['sum_time'] / e['count']}
            for key, e in totals.items()
        }
        for (answer, rule), stats in sorted(results.items(), key=lambda kv: -kv[1]['count']):
            self.reporter.info(f"{answer}: {stats['count']} (avg temp {stats['avg_temp']:.1f}, "
                               f"avg time {stats['avg_time']:.1f}) rule: {rule}")
        self._set_state(RunState.READY)
        return results

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def snapshot(self) -> Dict[str, Any]:
        """A plain-data view of the engine for displays and tests."""
        workspace = self.workspace
        return {
            'state': self.state.value,
            'tick': self.coderack.num_codelets_run,
            'temperature': self.temperature.value(),
            'strings': {
                'initial': workspace.initial_string.text,
                'modified': workspace.modified_string.text,
                'target': workspace.target_string.text,
            },
            'answer': workspace.final_answer,
            'rule': workspace.rule.synopsis() if workspace.rule else None,
            'bonds': len(workspace.structures_of_kind(StructureKind.BOND)),
            'groups': len(workspace.structures_of_kind(StructureKind.GROUP)),
            'correspondences': len(workspace.structures_of_kind(StructureKind.CORRESPONDENCE)),
            'pending_codelets': self.coderack.pending_by_kind(),
            'active_concepts': [node.name for node in self.slipnet.fully_active_nodes()],
        }
