# blog/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blog.config import settings
from blog.core.db import init_db, close_db
from blog.core.errors import AccountError
from blog.core.presence import PresenceChannel

from blog.api.v1.routers import auth, users, admin
from blog.api.v1.routers.ws_presence import router as ws_presence_router

from blog.core.bootstrap import ensure_default_admin
logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# Presence channel shared by the login/logout handlers and /ws/presence
app.state.presence = PresenceChannel()

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(AccountError)
async def account_error_handler(request: Request, exc: AccountError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()})

@app.on_event("startup")
async def on_startup():
    await init_db()
    # Ensure there's a default admin account on first run
    await ensure_default_admin()

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST (users before admin so /users/profile wins over /users/{user_id})
app.include_router(auth.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")

# WebSocket
app.include_router(ws_presence_router)

@app.get("/healthz")
def healthz():
    return {"ok": True}
