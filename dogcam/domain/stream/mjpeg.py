"""Multipart image pusher.

Replays one still image as a `multipart/x-mixed-replace` stream so browsers
redraw it like a live MJPEG feed. The image is read once per connection and the
same frame bytes are written at a fixed rate until the client disconnects.
"""

import asyncio
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from dogcam.utils.app_errors import StreamSourceError

BOUNDARY = "dogcamframe"
DEFAULT_CONTENT_TYPE = "image/jpeg"


def guess_content_type(path: str | Path) -> str:
    content_type, _ = mimetypes.guess_type(str(path))
    return content_type or DEFAULT_CONTENT_TYPE


@dataclass(frozen=True)
class StreamImage:
    path: Path
    data: bytes
    content_type: str

    @classmethod
    def load(cls, path: str | Path) -> "StreamImage":
        """Read the whole image file. Every call reads the file again."""
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            logger.warning("Stream image unreadable: {} ({})", path, exc)
            raise StreamSourceError() from exc

        return cls(path=path, data=data, content_type=guess_content_type(path))


def stream_headers(boundary: str = BOUNDARY) -> dict[str, str]:
    return {
        "Content-Type": f"multipart/x-mixed-replace; boundary={boundary}",
        "Cache-Control": "no-cache, no-store, must-revalidate",
        "Pragma": "no-cache",
        "Connection": "close",
    }


def build_frame(image: StreamImage, boundary: str = BOUNDARY) -> bytes:
    return b"".join(
        (
            f"--{boundary}\r\n".encode(),
            f"Content-Type: {image.content_type}\r\n".encode(),
            f"Content-Length: {len(image.data)}\r\n\r\n".encode(),
            image.data,
            b"\r\n",
        )
    )


class MjpegResponse(Response):
    """Streaming response that pushes the same frame every ``1 / fps`` seconds.

    One push task runs per connection. It stops when the client disconnects or a
    write fails; the other side is cancelled in either case.
    """

    def __init__(self, image: StreamImage, fps: int, boundary: str = BOUNDARY):
        if fps < 1:
            raise ValueError("fps must be >= 1")

        self.image = image
        self.fps = fps
        self.boundary = boundary
        self.frame_interval = 1 / fps
        self.frames_sent = 0
        self.push_task: asyncio.Task | None = None

        self.status_code = 200
        self.background = None
        self.init_headers(stream_headers(boundary))

    async def _push_frames(self, send: Send) -> None:
        frame = build_frame(self.image, self.boundary)
        loop = asyncio.get_running_loop()
        next_tick = loop.time()

        while True:
            # Fixed-rate schedule: a slow write shortens the next sleep
            next_tick += self.frame_interval
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            await send({"type": "http.response.body", "body": frame, "more_body": True})
            self.frames_sent += 1

    async def _wait_for_disconnect(self, receive: Receive) -> None:
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                return

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": self.raw_headers,
            }
        )
        logger.info(
            "Stream started: image={} bytes={} fps={}",
            self.image.path.name,
            len(self.image.data),
            self.fps,
        )

        self.push_task = asyncio.create_task(self._push_frames(send))
        disconnect_task = asyncio.create_task(self._wait_for_disconnect(receive))
        try:
            await asyncio.wait(
                {self.push_task, disconnect_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (self.push_task, disconnect_task):
                task.cancel()
            await asyncio.gather(self.push_task, disconnect_task, return_exceptions=True)
            logger.info("Stream stopped after {} frames", self.frames_sent)

        # A failed write is a client disconnect; nothing to report upstream
        if not self.push_task.cancelled() and self.push_task.exception() is not None:
            logger.debug("Stream write failed: {}", self.push_task.exception())


def begin_stream(path: str | Path, fps: int) -> MjpegResponse:
    """Load the image and return the streaming response.

    Raises:
        StreamSourceError: the image cannot be read; no headers have been sent.
    """
    return MjpegResponse(StreamImage.load(path), fps)
