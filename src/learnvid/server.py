import datetime
import uuid
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, Field

from learnvid import runtime, vision, types as t
from learnvid.errors import VisionError


class _Out(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class VideoOut(_Out):
    video_id: uuid.UUID
    url: str
    indexing_status: t.IndexingStatus
    metadata: dict[str, Any] | None = None
    indexing_type: str = ""


class VideosResponse(BaseModel):
    videos: list[VideoOut]


class SearchResultOut(_Out):
    video_chunk_id: uuid.UUID
    video_id: uuid.UUID
    score: float
    start_timestamp: float
    end_timestamp: float
    presigned_url: str = ""
    caption: str = ""


class SearchResponse(BaseModel):
    query: str
    results: list[SearchResultOut]


class AnswerOut(_Out):
    answer: str
    confidence: float
    video_id: uuid.UUID
    question: str
    created_at: datetime.datetime


class UploadRequest(BaseModel):
    video_url: str = Field(min_length=1)
    video_name: str = Field(min_length=1)


class DeleteRequest(BaseModel):
    video_ids: list[uuid.UUID] = Field(min_length=1)


class DeleteResponse(BaseModel):
    deleted: int


class AskRequest(BaseModel):
    question: str


def create_app(service: vision.VisionService | None = None) -> FastAPI:
    app = FastAPI(title="Video Learning Tool")
    _service = service or vision.VisionService(dump_dir=runtime.DUMP_DIR)

    frontend_index = Path(__file__).parent.parent.parent / "frontend" / "index.html"

    @app.exception_handler(VisionError)
    async def vision_error(request: Request, exc: VisionError):
        return JSONResponse({"detail": str(exc)}, status_code=502)

    @app.get("/")
    def index():
        if frontend_index.exists():
            return FileResponse(str(frontend_index))
        return JSONResponse({"error": "Frontend not built"}, status_code=404)

    @app.get("/videos", response_model=VideosResponse)
    def videos_list():
        videos = _service.list_videos()
        return VideosResponse(videos=[VideoOut.model_validate(v) for v in videos])

    @app.post("/videos", response_model=VideoOut)
    def videos_upload(body: UploadRequest):
        video = _service.upload_video(body.video_url, body.video_name)
        return VideoOut.model_validate(video)

    @app.delete("/videos", response_model=DeleteResponse)
    def videos_delete(body: DeleteRequest):
        _service.delete_videos(body.video_ids)
        return DeleteResponse(deleted=len(body.video_ids))

    @app.get("/search", response_model=SearchResponse)
    def search(q: str = Query(default="")):
        if not q.strip():
            raise HTTPException(status_code=400, detail="Empty query")
        results = _service.search(q)
        return SearchResponse(query=q, results=[SearchResultOut.model_validate(r) for r in results])

    @app.post("/videos/{video_id}/ask", response_model=AnswerOut)
    def ask(video_id: uuid.UUID, body: AskRequest):
        if not body.question.strip():
            raise HTTPException(status_code=400, detail="Empty question")
        answer = _service.ask_question(video_id, body.question)
        return AnswerOut.model_validate(answer)

    frontend_static = Path(__file__).parent.parent.parent / "frontend" / "static"
    if frontend_static.exists():
        app.mount("/static", StaticFiles(directory=str(frontend_static)), name="static")

    return app
