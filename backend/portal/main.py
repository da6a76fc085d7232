"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal.api import (
	admin,
	announcements,
	companies,
	constants as constants_api,
	events,
	gawk,
	map as map_api,
	ops,
	profiles,
	reminders,
	residency,
	tags,
)
from portal.api.errors import install_error_handlers
from portal.api.middleware_request_id import RequestIdMiddleware
from portal.domain.common.constants import DEFAULT_CONSTANTS, load_constants
from portal.infra import postgres
from portal.obs import init as obs_init
from portal.settings import settings

DEV_ORIGINS = [
	"http://localhost:3000",
	"http://127.0.0.1:3000",
	"http://localhost:5173",
	"http://127.0.0.1:5173",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
	pool = await postgres.init_pool()
	app.state.constants = await load_constants(pool) if pool else DEFAULT_CONSTANTS
	try:
		yield
	finally:
		await postgres.close_pool()


def _allowed_origins() -> list[str]:
	allow_origins = list(settings.cors_allow_origins or [])
	# Starlette disallows wildcard '*' with allow_credentials=True.
	if not allow_origins or "*" in allow_origins:
		allow_origins = DEV_ORIGINS if settings.is_dev() else []
	return allow_origins


app = FastAPI(title="Alumni Portal", lifespan=lifespan)
install_error_handlers(app)
app.add_middleware(
	CORSMiddleware,
	allow_origins=_allowed_origins(),
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)
obs_init(app)
# Ensure every request carries an X-Request-Id and make it available on request.state
app.add_middleware(RequestIdMiddleware)

app.include_router(ops.router, tags=["ops"])
app.include_router(constants_api.router)
app.include_router(profiles.router)
app.include_router(events.router)
app.include_router(announcements.router)
app.include_router(tags.router)
app.include_router(reminders.router)
app.include_router(residency.router)
app.include_router(companies.router)
app.include_router(map_api.router)
app.include_router(gawk.router)
app.include_router(admin.router)
