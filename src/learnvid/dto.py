"""
Wire-format records for the Reka Vision API and their conversion to the
domain types in `learnvid.types`.

Every vendor field name lives here; the rest of the package only sees
domain records.
"""

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from learnvid import types as t

_STATUS_ALIASES = {
    "pending": t.IndexingStatus.PENDING,
    "download_initiated": t.IndexingStatus.PENDING,
    "processing": t.IndexingStatus.INDEXING,
    "indexing": t.IndexingStatus.INDEXING,
    "completed": t.IndexingStatus.INDEXED,
    "indexed": t.IndexingStatus.INDEXED,
    "failed": t.IndexingStatus.FAILED,
}


def parse_indexing_status(status: str | None) -> t.IndexingStatus:
    """Map a vendor status string onto `IndexingStatus`; unknown values are PENDING."""
    return _STATUS_ALIASES.get((status or "").lower(), t.IndexingStatus.PENDING)


class _Dto(BaseModel):
    model_config = ConfigDict(extra="ignore")


class VideoDto(_Dto):
    video_id: str | None = None
    url: str | None = None
    indexing_status: str | None = None
    metadata: dict[str, Any] | None = None
    indexing_type: str | None = None


class VideoListDto(_Dto):
    results: list[VideoDto] | None = None


class UploadResponseDto(_Dto):
    video_id: uuid.UUID
    status: str | None = None


class SearchResultDto(_Dto):
    video_chunk_id: uuid.UUID
    video_id: uuid.UUID
    score: float = 0.0
    start_timestamp: float = 0.0
    end_timestamp: float = 0.0
    s3_presigned_url: str | None = None
    plain_text_caption: str | None = None

    @model_validator(mode="after")
    def _check_span(self) -> "SearchResultDto":
        if self.start_timestamp > self.end_timestamp:
            raise ValueError(
                f"start_timestamp {self.start_timestamp} is after end_timestamp {self.end_timestamp}"
            )
        return self


class ChatResponseDto(_Dto):
    status: str | None = None
    chat_response: str | None = None
    error: str | None = None


def _parse_uuid_or_new(value: str | None) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except (TypeError, ValueError, AttributeError):
        return uuid.uuid4()


def to_video(dto: VideoDto) -> t.Video:
    return t.Video(
        video_id=_parse_uuid_or_new(dto.video_id),
        url=dto.url or "",
        indexing_status=parse_indexing_status(dto.indexing_status),
        metadata=dto.metadata,
        indexing_type=dto.indexing_type or "",
    )


def uploaded_video(dto: UploadResponseDto, video_url: str) -> t.Video:
    # The upload response does not echo the source URL.
    return t.Video(
        video_id=dto.video_id,
        url=video_url,
        indexing_status=parse_indexing_status(dto.status),
    )


def to_search_result(dto: SearchResultDto) -> t.SearchResult:
    return t.SearchResult(
        video_chunk_id=dto.video_chunk_id,
        video_id=dto.video_id,
        score=dto.score,
        start_timestamp=dto.start_timestamp,
        end_timestamp=dto.end_timestamp,
        presigned_url=dto.s3_presigned_url or "",
        caption=dto.plain_text_caption or "",
    )


def to_answer(dto: ChatResponseDto, video_id: uuid.UUID, question: str) -> t.QAAnswer:
    return t.QAAnswer(
        answer=dto.chat_response or "",
        video_id=video_id,
        question=question,
    )
