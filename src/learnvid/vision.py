"""
Client for the Reka Vision video-intelligence API.

`VisionService` turns the five domain operations (list, upload, delete,
search, ask) into HTTP calls against the vendor endpoint and maps the JSON
responses onto the records in `learnvid.types`. Each call is a single
attempt: nothing is retried and no timeout is imposed beyond whatever the
supplied `httpx.Client` carries.
"""

import datetime
import logging
import uuid
from pathlib import Path
from typing import Any, Iterable

import httpx
from pydantic import ValidationError

from learnvid import dto, runtime, types as t
from learnvid.errors import ParseError, TransportError, VendorError

logger = logging.getLogger(__name__)

BASE_URL = "https://vision-agent.api.reka.ai"
API_KEY_HEADER = "X-Api-Key"

SEARCH_MAX_RESULTS = 3
SEARCH_THRESHOLD = 0.5


class VisionService:
    def __init__(
        self,
        api_key: str | None = None,
        client: httpx.Client | None = None,
        base_url: str = BASE_URL,
        dump_dir: Path | None = None,
    ):
        # Raises ConfigurationError before any client is created.
        self._api_key = api_key or runtime.api_key()
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=None)
        self._base_url = base_url.rstrip("/")
        self._dump_dir = dump_dir

    def __enter__(self) -> "VisionService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def list_videos(self) -> list[t.Video]:
        logger.info("Fetching videos from Reka Vision API")
        resp = self._send("POST", "/videos/get", "fetch videos", json={})
        if self._dump_dir:
            self._save_response(resp.text)
        body = self._json(resp, "fetch videos")

        results = body.get("results") if isinstance(body, dict) else None
        if not isinstance(results, list):
            logger.warning("No videos found in response or response format unexpected")
            return []

        try:
            videos = [dto.to_video(dto.VideoDto.model_validate(r)) for r in results]
        except ValidationError as exc:
            logger.error("Unexpected video entry in response from Reka Vision API: %s", exc)
            raise ParseError("Failed to parse response from Reka Vision API", raw_response=body) from exc

        logger.info("Successfully retrieved %d videos", len(videos))
        return videos

    def upload_video(self, video_url: str, video_name: str) -> t.Video:
        """
        Register a remote video with the vendor and ask for it to be indexed.

        The response is expected to be `{video_id, status}`; the returned
        Video carries `video_url` since the vendor does not echo it.
        """
        logger.info("Uploading video %s from URL %s", video_name, video_url)
        operation = f"upload video {video_name}"
        # (None, value) tuples force a multipart body without filenames.
        form = {
            "video_url": (None, video_url),
            "video_name": (None, video_name),
            "index": (None, "true"),
        }
        resp = self._send("POST", "/videos/upload", operation, files=form)
        body = self._json(resp, operation)

        try:
            upload = dto.UploadResponseDto.model_validate(body)
        except ValidationError as exc:
            logger.error("Error parsing upload response for video %s: %s", video_name, exc)
            raise ParseError(
                f"Failed to parse upload response for video {video_name} from Reka Vision API",
                raw_response=body,
            ) from exc

        video = dto.uploaded_video(upload, video_url)
        logger.info("Successfully uploaded video %s with ID %s", video_name, video.video_id)
        return video

    def delete_videos(self, video_ids: Iterable[uuid.UUID]) -> None:
        ids = [str(i) for i in video_ids]
        logger.info("Deleting videos with IDs: %s", ", ".join(ids))
        self._send("DELETE", "/videos/delete", "delete videos", json={"video_ids": ids})
        logger.info("Successfully deleted videos with IDs: %s", ", ".join(ids))

    def search(self, query: str) -> list[t.SearchResult]:
        logger.info("Searching videos for %r", query)
        payload = {
            "query": query,
            "max_results": SEARCH_MAX_RESULTS,
            "threshold": SEARCH_THRESHOLD,
        }
        resp = self._send("POST", "/search/hybrid", "search videos", json=payload)
        body = self._json(resp, "search videos")

        if not isinstance(body, list):
            logger.warning("No search results in response or response format unexpected")
            return []

        # One bad entry fails the whole call; partial results are never returned.
        try:
            results = [dto.to_search_result(dto.SearchResultDto.model_validate(r)) for r in body]
        except ValidationError as exc:
            logger.error("Error parsing search results from Reka Vision API: %s", exc)
            raise ParseError("Failed to parse search results from Reka Vision API", raw_response=body) from exc

        logger.info("Search for %r returned %d results", query, len(results))
        return results

    def ask_question(self, video_id: uuid.UUID, question: str) -> t.QAAnswer:
        logger.info("Asking question about video %s", video_id)
        payload = {
            "video_id": str(video_id),
            "messages": [{"role": "user", "content": question}],
        }
        resp = self._send("POST", "/qa/chat", "ask question", json=payload)
        body = self._json(resp, "ask question")

        try:
            chat = dto.ChatResponseDto.model_validate(body)
        except ValidationError as exc:
            logger.error("Error parsing chat response from Reka Vision API: %s", exc)
            raise ParseError("Failed to parse chat response from Reka Vision API", raw_response=body) from exc

        if chat.status != "success":
            message = chat.error or "Unknown error"
            logger.error("Reka Vision API could not answer question about video %s: %s", video_id, message)
            raise VendorError(f"Failed to get answer from Reka Vision API: {message}", raw_response=body)

        return dto.to_answer(chat, video_id, question)

    def _send(self, method: str, path: str, operation: str, **kwargs) -> httpx.Response:
        request = self._client.build_request(
            method, f"{self._base_url}{path}", headers={API_KEY_HEADER: self._api_key}, **kwargs,
        )
        try:
            resp = self._client.send(request)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("HTTP error occurred while trying to %s: %s", operation, exc)
            raw = exc.response.text if isinstance(exc, httpx.HTTPStatusError) else None
            raise TransportError(f"Failed to {operation} from Reka Vision API", raw_response=raw) from exc
        return resp

    def _json(self, resp: httpx.Response, operation: str) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            logger.error("Invalid JSON in response while trying to %s: %s", operation, exc)
            raise ParseError(
                f"Failed to parse {operation} response from Reka Vision API", raw_response=resp.text,
            ) from exc

    def _save_response(self, content: str) -> Path:
        timestamp = datetime.datetime.now().strftime("%Y-%m-%d_%H%M")
        path = self._dump_dir / f"videos_response_{timestamp}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        logger.info("Response saved to: %s", path)
        return path
