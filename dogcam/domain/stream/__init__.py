from .mjpeg import (
    BOUNDARY,
    MjpegResponse,
    StreamImage,
    begin_stream,
    build_frame,
    guess_content_type,
    stream_headers,
)

__all__ = [
    "BOUNDARY",
    "MjpegResponse",
    "StreamImage",
    "begin_stream",
    "build_frame",
    "guess_content_type",
    "stream_headers",
]
