"""
Explicit task graph for composed, multi-step operations.

A composed operation (e.g. "save a record, resolve its companions, then link
them") is declared as named steps with named dependency edges, so the ordering
contract can be inspected and tested on its own.

Execution model:
    * Steps whose dependencies have all completed form a wave.
    * A step is called with its dependencies' results as positional
      arguments, in the order they were declared in ``depends_on``.
    * If a step in a wave fails, the remaining steps of that wave still run
      (there is no cancellation signal), no later wave is started, and the
      first failure is re-raised. Side effects already committed by finished
      steps are not rolled back.

Steps in a wave run one after another, in declaration order, on the caller's
thread and session.
"""
import logging
from typing import Any, Callable, Dict, List, Sequence, Tuple

logger = logging.getLogger(__name__)


class TaskGraph:
    """A small DAG of named steps executed in dependency waves."""

    def __init__(self, name: str):
        self.name = name
        self._steps: Dict[str, Tuple[Callable[..., Any], Tuple[str, ...]]] = {}
        self.results: Dict[str, Any] = {}
        self.order: List[str] = []

    def add(self, name: str, fn: Callable[..., Any], depends_on: Sequence[str] = ()) -> "TaskGraph":
        """Register a step. Dependencies must already be registered."""
        if name in self._steps:
            raise ValueError(f"Duplicate step '{name}' in task graph '{self.name}'")
        missing = [dep for dep in depends_on if dep not in self._steps]
        if missing:
            raise ValueError(f"Step '{name}' depends on unknown steps {missing}")
        self._steps[name] = (fn, tuple(depends_on))
        return self

    def dependencies(self, name: str) -> Tuple[str, ...]:
        return self._steps[name][1]

    def run(self) -> Dict[str, Any]:
        """Execute every step and return results keyed by step name."""
        pending = list(self._steps)
        while pending:
            wave = [
                step for step in pending
                if all(dep in self.results for dep in self._steps[step][1])
            ]
            first_error = None
            for step in wave:
                fn, deps = self._steps[step]
                try:
                    self.results[step] = fn(*[self.results[dep] for dep in deps])
                    self.order.append(step)
                    logger.debug(f"[{self.name}] step '{step}' completed")
                except Exception as e:
                    logger.debug(f"[{self.name}] step '{step}' failed: {e}")
                    if first_error is None:
                        first_error = e
            if first_error is not None:
                raise first_error
            pending = [step for step in pending if step not in wave]
        return self.results
