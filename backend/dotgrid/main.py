"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotgrid.config import settings
from dotgrid.engine.errors import InvalidConfiguration, OutOfBounds

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.dotgrid_log_level.upper(), logging.DEBUG),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="dotgrid",
        description="Connector regions between paired circles on a grid: enumeration, masks and frames",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import the pass modules so @render_pass decorators fire
    _register_passes()

    app.add_exception_handler(InvalidConfiguration, _invalid_configuration)
    app.add_exception_handler(OutOfBounds, _out_of_bounds)

    from dotgrid.api.router import api_router

    app.include_router(api_router)

    return app


def _register_passes() -> None:
    import importlib

    importlib.import_module("dotgrid.engine.passes")


async def _invalid_configuration(request: Request, exc: InvalidConfiguration) -> JSONResponse:
    logger.info("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _out_of_bounds(request: Request, exc: OutOfBounds) -> JSONResponse:
    logger.info("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "cell": list(exc.cell), "width": exc.width, "height": exc.height},
    )


app = create_app()
