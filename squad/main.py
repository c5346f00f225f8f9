from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from squad.api.errors import register_error_handlers
from squad.api.routes import build_router
from squad.core.config import Settings, get_settings
from squad.core.database import Database
from squad.web import views

STATIC_DIR = Path(__file__).resolve().parent / "static"


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    owns_database = database is None
    database = database or Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.open()
        database.create_all()
        yield
        if owns_database:
            database.close()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    register_error_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=settings.cors_allow_headers,
    )

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(build_router(), prefix=settings.api_prefix, tags=["API"])
    app.include_router(views.router, tags=["Pages"])
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("squad.main:app", host="0.0.0.0", port=8000, reload=True)
