from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Mapping, Optional

from .types import (
    TlyNull, TlyInt, TlyFloat, TlyString, TlyBool, TlyArray, TlyIterable,
    TlyFn, TlyNativeFn, TlyValue, is_tly_value, type_name,
    TallyRuntimeError, TallyTypeError, TallyDuplicateDeclaration,
    TallyUnknownVariable, TallyMalformedDeclaration, TallyIncompatibleTypes,
    TallyNumericError, TallyArithmeticError, TallySyntaxError,
)
from .utils import clone_value

logger = logging.getLogger(__name__)


class Environment:
    """Flat name -> value table for one evaluation pass.

    Bindings follow a declare-once, assign-many discipline: `declare` is the
    only way to introduce a name and `assign` only overwrites existing ones.
    """

    def __init__(self, bindings: Optional[Mapping[str, TlyValue]] = None):
        self.vars: Dict[str, TlyValue] = {}
        self._claim = threading.Lock()

        if bindings:
            for name, val in bindings.items():
                if not is_tly_value(val):
                    raise TallyTypeError(f"Cannot bind '{name}' to non-value {type(val).__name__}")
                self.vars[name] = val

    def declare(self, name: str, val: TlyValue) -> None:
        if name in self.vars:
            raise TallyDuplicateDeclaration(name)

        self.vars[name] = val
        logger.debug("declare %s = %r", name, val)

    def assign(self, name: str, val: TlyValue) -> None:
        if name not in self.vars:
            raise TallyUnknownVariable(name)

        self.vars[name] = val
        logger.debug("assign %s = %r", name, val)

    def lookup(self, name: str) -> Optional[TlyValue]:
        val = self.vars.get(name)
        if val is None:
            return None

        return clone_value(val)

    def names(self) -> List[str]:
        return list(self.vars)

    def snapshot(self) -> Dict[str, TlyValue]:
        return {name: clone_value(val) for name, val in self.vars.items()}

    def __contains__(self, name: object) -> bool:
        return name in self.vars

    def __len__(self) -> int:
        return len(self.vars)

    def __repr__(self) -> str:
        bindings = ", ".join(f"{name}={val!r}" for name, val in self.vars.items())
        return f"Environment({bindings})"

    @contextmanager
    def exclusive(self) -> Iterator['Environment']:
        """Claim the environment for one evaluation pass."""
        if not self._claim.acquire(blocking=False):
            raise TallyRuntimeError("Environment is already claimed by another evaluation pass")

        try:
            yield self
        finally:
            self._claim.release()

    def is_claimed(self) -> bool:
        return self._claim.locked()
