"""Authenticated image endpoints."""

from fastapi import APIRouter
from fastapi.responses import Response

from dogcam.api.dependency import AppConfigDep, CurrentUser
from dogcam.domain.stream import MjpegResponse, StreamImage, begin_stream

router = APIRouter()


@router.get("/mjpeg")
async def mjpeg(user: CurrentUser, config: AppConfigDep) -> MjpegResponse:
    """Stream the configured image as multipart/x-mixed-replace until the client leaves.

    Raises:
        500: the image cannot be read (no multipart headers are sent)
    """
    return begin_stream(config.STREAM_IMAGE, config.STREAM_FPS)


@router.get("/image")
async def image(user: CurrentUser, config: AppConfigDep) -> Response:
    """Return the raw image once."""
    stream_image = StreamImage.load(config.STREAM_IMAGE)
    return Response(
        content=stream_image.data,
        media_type=stream_image.content_type,
        headers={"Cache-Control": "no-cache"},
    )
