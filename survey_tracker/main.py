"""Application entrypoint: ``uvicorn survey_tracker.main:app``."""

from __future__ import annotations

from fastapi import FastAPI

from survey_tracker.api.v1.router import get_api_router
from survey_tracker.core.config import get_config
from survey_tracker.core.startup import bootstrap


def create_app() -> FastAPI:
    cfg = get_config()
    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION)
    app.include_router(get_api_router(), prefix=cfg.API_PREFIX)

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    bootstrap()
    cfg = get_config()
    uvicorn.run("survey_tracker.main:app", host=cfg.API_HOST, port=cfg.API_PORT)
