from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from sqlalchemy.engine import Engine

from .core.config import settings
from .core.logging_setup import setup_logging
from .db import session as db_session
from .api.errors import register_error_handlers
from .api.v1 import auth, categories, health, tasks, templates


def create_app(engine: Optional[Engine] = None) -> FastAPI:
    setup_logging(level=settings.LOG_LEVEL, log_dir=settings.LOG_DIR)
    bind = engine or db_session.engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db_session.init_db(bind)
        yield

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.engine = bind
    register_error_handlers(app)

    app.include_router(health.router,     prefix=settings.API_V1_PREFIX)
    app.include_router(auth.router,       prefix=settings.API_V1_PREFIX)
    app.include_router(categories.router, prefix=settings.API_V1_PREFIX)
    app.include_router(templates.router,  prefix=settings.API_V1_PREFIX)
    app.include_router(tasks.router,      prefix=settings.API_V1_PREFIX)
    return app


app = create_app()


def serve():
    uvicorn.run("timeplanner.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    serve()
