import datetime
import enum
import uuid
from dataclasses import dataclass, field
from typing import Any


class IndexingStatus(str, enum.Enum):
    PENDING = "pending"
    INDEXING = "indexing"
    INDEXED = "indexed"
    FAILED = "failed"


@dataclass
class Video:
    video_id: uuid.UUID
    url: str
    indexing_status: IndexingStatus = IndexingStatus.PENDING
    metadata: dict[str, Any] | None = None
    indexing_type: str = ""


@dataclass
class SearchResult:
    video_chunk_id: uuid.UUID
    video_id: uuid.UUID
    score: float
    start_timestamp: float
    end_timestamp: float
    presigned_url: str = ""
    caption: str = ""


@dataclass
class QAAnswer:
    answer: str
    video_id: uuid.UUID
    question: str
    confidence: float = 1.0
    created_at: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc),
    )
