"""Engine lifecycle events delivered to registered handlers."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EngineEventType(str, Enum):
    """Events emitted by ThoughtGraphEngine."""

    INDEX_BUILDING = "index:building"
    INDEX_BUILT = "index:built"
    SEARCH_STARTED = "search:started"
    SEARCH_COMPLETED = "search:completed"
    RETRIEVAL_STARTED = "retrieval:started"
    RETRIEVAL_COMPLETED = "retrieval:completed"


class EngineEvent(BaseModel):
    """One emitted event with its payload."""

    model_config = ConfigDict(frozen=True)

    type: EngineEventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    data: dict[str, Any] = Field(default_factory=dict)
