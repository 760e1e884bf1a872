"""
Entity API Server
Core functionality: API4-style CRUD over registered entities
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from entity_api.api.routes import api4, health
from entity_api.database.connection import init_database, close_database
from entity_api.exceptions import APIException
from entity_api.models.response import Api4Response, status_code_for

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    await init_database()
    yield
    await close_database()


async def api_exception_handler(request: Request, exc: APIException):
    """Render APIException as an error envelope"""
    entity = request.path_params.get("entity")
    action = request.path_params.get("action")
    status_code = status_code_for(exc.error_code)
    logger.warning(f"{entity}.{action} failed with {status_code}: {exc.message}")

    response = Api4Response.build_error(
        error_type=exc.error_code,
        message=exc.message,
        entity=entity,
        action=action,
        details=exc.details or None
    )
    return JSONResponse(status_code=status_code, content=response.model_dump())


def create_app() -> FastAPI:
    app = FastAPI(
        title="Entity API",
        description="API4-style entity CRUD with metadata and a conformance harness",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_exception_handler(APIException, api_exception_handler)

    # Include API routes
    app.include_router(health.router, tags=["Health"])
    app.include_router(api4.router, tags=["API4"])
    return app


# FastAPI app instance is exported for use by uvicorn
# Server startup is handled by main.py at the project root
app = create_app()
