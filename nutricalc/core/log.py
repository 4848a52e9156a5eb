import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional

from nutricalc.core.types import SavedCalculationRecord

logger = logging.getLogger(__name__)


class EmptyCommitError(RuntimeError):
    """Raised when a calculator is committed before it has a result worth saving."""

    def __init__(self, calculator_key: str):
        super().__init__(f"{calculator_key}: nothing to commit, result is incomplete")
        self.calculator_key = calculator_key


class MemoryLogSink:
    """
    In-process stand-in for the persistence collaborator.

    Stores every commit as a SavedCalculationRecord stamped with the sink's
    person id and the current time. The payload goes through ``json`` on the
    way in, so anything that is not JSON-serializable fails here the same way
    it would on the wire.
    """

    def __init__(self, person_id: Optional[str] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.person_id = person_id
        self.records: List[SavedCalculationRecord] = []
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def __call__(self, calculator_key: str, log_type: str, description: str,
                       payload: Mapping[str, Any]) -> None:
        data = json.loads(json.dumps(payload))
        record = SavedCalculationRecord(
            calculator_key=calculator_key,
            log_type=log_type,
            description=description,
            inputs=data.get("inputs", {}),
            result=data.get("result", {}),
            person_id=self.person_id,
            timestamp=self._clock(),
        )
        self.records.append(record)
        logger.debug("Stored %s record for person %s", calculator_key, self.person_id)

    def latest(self, calculator_key: str) -> Optional[SavedCalculationRecord]:
        for record in reversed(self.records):
            if record.calculator_key == calculator_key:
                return record
        return None
