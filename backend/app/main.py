# Invoice generator backend entrypoint.

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import analytics
from backend.app.api import clients
from backend.app.api import designs
from backend.app.api import folders
from backend.app.api import invoices
from backend.app.api import login
from backend.app.api import profile
from backend.app.api import register
from backend.app.api import status_logs
from backend.app.api import tags
from backend.app.core.errors import register_exception_handlers
from backend.app.core.settings import get_settings
from backend.app.db.base import Base
from backend.app.db.session import engine

settings = get_settings()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(register.router)
app.include_router(login.router)
app.include_router(invoices.router)
app.include_router(folders.router)
app.include_router(tags.router)
app.include_router(status_logs.router)
app.include_router(clients.router)
app.include_router(profile.router)
app.include_router(analytics.router)
app.include_router(designs.router)


@app.get("/")
def read_root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}
