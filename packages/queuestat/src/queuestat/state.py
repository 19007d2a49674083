"""Previous-poll values used to turn counters into rates."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class _StatePayload(BaseModel):
    timestamp: float
    values: dict[str, float]


@dataclass(frozen=True)
class DiffState:
    """Raw metric values reported by the previous poll."""

    timestamp: float | None = None
    values: dict[str, float] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.timestamp is None


class DiffStateStore:
    """JSON file holding the last poll's raw values."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> DiffState:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return DiffState()
        except OSError as e:
            logger.debug("Could not read diff state %s: %s", self.path, e)
            return DiffState()

        try:
            payload = _StatePayload.model_validate_json(raw)
        except ValidationError as e:
            logger.debug("Ignoring corrupt diff state %s: %s", self.path, e)
            return DiffState()
        return DiffState(timestamp=payload.timestamp, values=payload.values)

    def save(self, state: DiffState) -> None:
        if state.timestamp is None:
            return
        payload = {"timestamp": state.timestamp, "values": state.values}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
