"""Login and viewer pages."""

from html import escape

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from dogcam.api.dependency import AppConfigDep, CurrentUser

router = APIRouter()

LOGIN_HTML = """
<!DOCTYPE html>
<html>
<head>
    <title>DogCam - Sign in</title>
    <meta charset="utf-8"/>
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <style>
        body { margin: 0; padding: 4rem 1rem; font-family: sans-serif; text-align: center; }
        a.button { display: inline-block; padding: 0.75rem 1.5rem; border-radius: 4px;
                   background: #1a73e8; color: #fff; text-decoration: none; }
    </style>
</head>
<body>
    <h1>DogCam</h1>
    <p>Sign in to watch the stream.</p>
    <a class="button" href="/auth/google">Sign in with Google</a>
</body>
</html>
"""

INDEX_HTML = """
<!DOCTYPE html>
<html>
<head>
    <title>DogCam</title>
    <meta charset="utf-8"/>
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <style>
        body {{ margin: 0; padding: 1rem; font-family: sans-serif; text-align: center; }}
        img {{ max-width: 100%; }}
    </style>
</head>
<body>
    <header>
        <span>Signed in as {display_name}</span> |
        <a href="/logout">Log out</a>
    </header>
    <main>
        <img src="/mjpeg" alt="Live stream of {image_name}">
        <p>{image_name} @ {fps} fps</p>
    </main>
</body>
</html>
"""


@router.get("/login", response_class=HTMLResponse)
async def login_page():
    return HTMLResponse(LOGIN_HTML)


@router.get("/", response_class=HTMLResponse)
async def index_page(user: CurrentUser, config: AppConfigDep):
    html_content = INDEX_HTML.format(
        display_name=escape(user.display_name or user.email),
        image_name=escape(config.stream_image_name),
        fps=config.STREAM_FPS,
    )
    return HTMLResponse(html_content)
