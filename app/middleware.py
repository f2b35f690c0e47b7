import logging
import time
from urllib.parse import quote

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse

from app.config import config

PUBLIC_PATHS = ("/login", "/auth", "/logout", "/about")
# the JSON API and static files are never gated
PUBLIC_PREFIXES = ("/sessions", "/static")


def is_public_path(path: str) -> bool:
    if path == "/":
        return True
    if any(path == p or path.startswith(p + "/") for p in PUBLIC_PATHS):
        return True
    return any(path == p or path.startswith(p + "/") for p in PUBLIC_PREFIXES)


def token_expired(user: dict, now=None) -> bool:
    expires_at = user.get("expires_at")
    if not isinstance(expires_at, (int, float)):
        return False
    return (now if now is not None else time.time()) >= expires_at


class AuthGateMiddleware(BaseHTTPMiddleware):
    """Redirects anonymous visitors to /login when WITH_AUTH is on.

    Must sit inside SessionMiddleware so ``request.session`` is populated.
    """

    async def dispatch(self, request, call_next):
        if not config.WITH_AUTH or is_public_path(request.url.path):
            return await call_next(request)

        user = request.session.get("user")
        if not user:
            logging.info("no signed-in user for %s; redirecting to login", request.url.path)
            return self._to_login(request)
        if token_expired(user):
            logging.info("token expired for %s; redirecting to login", user.get("email"))
            request.session.pop("user", None)
            return self._to_login(request)
        return await call_next(request)

    @staticmethod
    def _to_login(request):
        target = request.url.path
        if request.url.query:
            target += "?" + request.url.query
        return RedirectResponse(f"/login?next={quote(target, safe='')}", status_code=303)
