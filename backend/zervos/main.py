from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response

from zervos.core.config import settings
from zervos.core.database import init_db
from zervos.routers import invoices, notifications, workspaces

OPENAPI_TAGS = [
    {"name": "Notifications", "description": "In-app notifications and unread counts."},
    {"name": "Workspaces", "description": "Workspaces and the active workspace selection."},
    {"name": "Invoices", "description": "Locally stored booking invoices."},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_db()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "State layer of the Zervos booking dashboard: notifications, "
        "workspaces and invoices persisted in shared client storage."
    ),
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def options_handler(request: Request, call_next):  # type: ignore[no-untyped-def]
    if request.method == "OPTIONS":
        origin = request.headers.get("origin", "*")
        return Response(
            status_code=200,
            headers={
                "Access-Control-Allow-Origin": origin,
                "Access-Control-Allow-Methods": "*",
                "Access-Control-Allow-Headers": "*",
                "Access-Control-Allow-Credentials": "true",
                "Access-Control-Max-Age": "86400",
            },
        )
    return await call_next(request)


app.include_router(
    notifications.router, prefix="/v1/notifications", tags=["Notifications"]
)
app.include_router(workspaces.router, prefix="/v1/workspaces", tags=["Workspaces"])
app.include_router(invoices.router, prefix="/v1/invoices", tags=["Invoices"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }
