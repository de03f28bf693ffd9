import json
from base64 import b64encode

import itsdangerous

SESSION_SECRET = "test-session-secret"
ALLOWED_EMAILS = "a@x.com,b@x.com"


def make_session_cookie(data: dict, secret: str = SESSION_SECRET, signer_cls=itsdangerous.TimestampSigner) -> str:
    """Sign session data the way Starlette's SessionMiddleware does."""
    payload = b64encode(json.dumps(data).encode("utf-8"))
    return signer_cls(secret).sign(payload).decode("utf-8")


def session_cookie_from(response) -> str | None:
    """Extract the session cookie value from a Set-Cookie header, if any."""
    for header in response.headers.get_list("set-cookie"):
        name, _, rest = header.partition("=")
        if name.strip() == "session":
            return rest.split(";", 1)[0]
    return None


def cookie_header(value: str) -> dict[str, str]:
    return {"Cookie": f"session={value}"}
