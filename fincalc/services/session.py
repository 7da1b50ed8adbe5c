"""
Calculator session state.

Holds the current parameters of one calculator view and recomputes its
output through the pure engine functions whenever they change. Rapid
changes are coalesced by a Debouncer, and the stored result always
reflects the parameter snapshot taken when the recompute ran.
"""

import logging
import threading
from dataclasses import replace
from typing import Any, Callable, Generic, Optional, TypeVar

from fincalc.calculations.amortization import LoanParameters, calculate_mortgage
from fincalc.calculations.compound import GrowthParameters, project
from fincalc.config import get_settings
from fincalc.services.debounce import Debouncer

logger = logging.getLogger(__name__)

P = TypeVar("P")
R = TypeVar("R")


class CalculatorSession(Generic[P, R]):
    """Current inputs and last output of a calculator."""

    def __init__(
        self,
        engine: Callable[[P], R],
        params: P,
        wait: Optional[float] = None,
        on_result: Optional[Callable[[R], Any]] = None,
    ):
        if wait is None:
            wait = get_settings().recompute_debounce_seconds
        self.engine = engine
        self.on_result = on_result
        self._params = params
        self._result: Optional[R] = None
        self._lock = threading.Lock()
        self._debouncer = Debouncer(wait, self.recompute)

    @property
    def params(self) -> P:
        return self._params

    @property
    def result(self) -> Optional[R]:
        return self._result

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def update(self, **changes) -> None:
        """Apply parameter changes and schedule a recompute."""
        with self._lock:
            self._params = replace(self._params, **changes)
        self._debouncer.call()

    def flush(self) -> None:
        """Run a scheduled recompute immediately."""
        self._debouncer.flush()

    def close(self) -> None:
        self._debouncer.cancel()

    def recompute(self) -> R:
        """Run the engine on the current parameter snapshot."""
        with self._lock:
            snapshot = self._params

        logger.debug(f"Recomputing {getattr(self.engine, '__name__', self.engine)} for {snapshot}")
        try:
            result = self.engine(snapshot)
        except Exception:
            logger.exception(f"Calculation failed for {snapshot}")
            raise

        with self._lock:
            self._result = result

        if self.on_result is not None:
            self.on_result(result)
        return result


def growth_session(params: GrowthParameters, **kwargs) -> CalculatorSession:
    """Session over the compound growth projection."""
    return CalculatorSession(project, params, **kwargs)


def mortgage_session(params: LoanParameters, **kwargs) -> CalculatorSession:
    """Session over the mortgage calculation."""
    return CalculatorSession(calculate_mortgage, params, **kwargs)
