"""
Generic holder for one calculator module.

A ``Calculator`` owns the editable input state of a single module, seeded from
a VitalsSnapshot. Results are never cached: every read of ``result`` runs the
module's ``compute`` on the current inputs.

Modules may define two optional hooks:

* ``update(inputs, changes) -> inputs`` for edits that touch more than the
  named fields (state machines, derived fields). Without it edits are applied
  with ``dataclasses.replace``.
* ``export_inputs(inputs) -> dict`` to add descriptive labels to the committed
  inputs. Without it the inputs dataclass is serialized as-is.
"""
import dataclasses
import logging
from typing import Any, Dict, Optional

from nutricalc.core.log import EmptyCommitError
from nutricalc.core.types import CalculatorModule, CalculatorResult, LogSink, VitalsSnapshot
from nutricalc.core.utils import to_float, to_jsonable

logger = logging.getLogger(__name__)

_OPTIONAL_NUMBERS = (Optional[float], Optional[int])
_NUMBERS = (float, int)


def _coerce_numeric(inputs: Any, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Parse form strings for numeric fields; a blank optional field becomes None."""
    kinds = {f.name: f.type for f in dataclasses.fields(inputs)}
    out = dict(changes)
    for name, value in changes.items():
        kind = kinds.get(name)
        if not isinstance(value, str) or kind not in _OPTIONAL_NUMBERS + _NUMBERS:
            continue
        parsed = to_float(value)
        if parsed is None and kind in _NUMBERS:
            # required field: leave the raw value for the module to reject
            continue
        if parsed is not None and kind in (int, Optional[int]):
            parsed = int(parsed)
        out[name] = parsed
    return out


class Calculator:
    def __init__(self, module: CalculatorModule, snapshot: Optional[VitalsSnapshot] = None):
        self.module = module
        self.key: str = module.id
        self.title: str = module.title
        self.reset(snapshot or VitalsSnapshot())

    def reset(self, snapshot: VitalsSnapshot) -> None:
        """Replace the snapshot and re-seed every input from it, discarding edits."""
        self._snapshot = snapshot
        self._inputs = self.module.inputs(snapshot)
        logger.debug("%s: inputs re-seeded from snapshot", self.key)

    @property
    def snapshot(self) -> VitalsSnapshot:
        return self._snapshot

    @property
    def inputs(self) -> Any:
        return self._inputs

    def update(self, **changes: Any) -> Any:
        changes = _coerce_numeric(self._inputs, changes)
        hook = getattr(self.module, "update", None)
        if hook is not None:
            self._inputs = hook(self._inputs, changes)
        else:
            self._inputs = dataclasses.replace(self._inputs, **changes)
        return self._inputs

    @property
    def result(self) -> Optional[CalculatorResult]:
        return self.module.compute(self._inputs)

    def payload(self, result: Optional[CalculatorResult] = None) -> Dict[str, Any]:
        if result is None:
            result = self.result
        export = getattr(self.module, "export_inputs", None)
        inputs = export(self._inputs) if export is not None else self._inputs
        return {"inputs": to_jsonable(inputs), "result": to_jsonable(result)}

    async def commit(self, sink: LogSink) -> None:
        """
        Hand the current inputs and result to ``sink``.

        The payload is a detached JSON-ready copy taken before the await, so the
        inputs may keep changing while the sink runs. Sink failures are logged
        and re-raised; in-memory state is left as it was.
        """
        inputs = self._inputs
        result = self.module.compute(inputs)
        described = self.module.describe(inputs, result) if result is not None else None
        if described is None:
            raise EmptyCommitError(self.key)
        log_type, description = described
        payload = self.payload(result)
        try:
            await sink(self.key, log_type, description, payload)
        except Exception:
            logger.exception("%s: commit failed", self.key)
            raise
        logger.info("%s: committed %r", self.key, description)
