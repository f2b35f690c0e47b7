import os
import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware

from .config import config, BASE_DIR
from .db import init_db
from .auth import router as auth_router
from .middleware import AuthGateMiddleware
from .routes.api import router as api_router
from .routes.split import router as split_router
from .services.persistence import writer
from .services.split_store import kv

logging.basicConfig(level=config.LOG_LEVEL)

app = FastAPI(title="Split Sessions")

# templates & static
templates = Jinja2Templates(directory=os.path.join(BASE_DIR, "templates"))
app.templates = templates
app.mount("/static", StaticFiles(directory=os.path.join(BASE_DIR, "static")), name="static")

# added first so it runs inside the session middleware
app.add_middleware(AuthGateMiddleware)
app.add_middleware(SessionMiddleware, secret_key=config.SECRET_KEY)

# include routers
app.include_router(auth_router)
app.include_router(api_router)
app.include_router(split_router)


@app.on_event("startup")
def on_startup():
    init_db()
    purged = kv.purge_expired()
    if purged:
        logging.info("purged %d expired sessions", purged)


@app.on_event("shutdown")
def on_shutdown():
    flushed = writer.flush_all()
    if flushed:
        logging.info("flushed %d pending session writes", flushed)
