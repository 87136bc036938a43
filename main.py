from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.database import Database

import database
from config import Settings, get_settings
from errors import register_exception_handlers
from log_config import RequestLoggingMiddleware, configure_logging, get_logger
from routers import auth, profile, users

logger = get_logger("api")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, development=settings.is_development)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.database_url and settings.database_name:
            db = database.connect(settings.database_url, settings.database_name)
            database.ensure_indexes(db)
        else:
            logger.warning("database_not_configured")
        yield
        database.close()

    app = FastAPI(title="DevConnector API", lifespan=lifespan)
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    @app.get("/")
    def read_root():
        return {"message": "API Running"}

    @app.get("/health")
    def health(db: Optional[Database] = Depends(database.get_optional_db)):
        response = {
            "backend": "running",
            "database": "not available",
            "collections": [],
        }
        if db is None:
            return response
        try:
            db.command("ping")
            response["database"] = "connected"
            response["collections"] = sorted(db.list_collection_names())[:10]
        except Exception as e:
            logger.warning("health_check_failed", error=str(e))
            response["database"] = "error"
        return response

    app.include_router(users.router)
    app.include_router(auth.router)
    app.include_router(profile.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
