import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rocketfuel.config import settings
from rocketfuel.container import Container
from rocketfuel.errors import INTERNAL_ERROR, DataAccessFailure, WebFailure
from rocketfuel.middleware import RequestLogMiddleware
from rocketfuel.routers import answers, questions, tags

VERSION = "1.0.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: Container = app.state.container
    await container.start()
    yield
    await container.stop()


async def web_failure_handler(request: Request, exc: WebFailure) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed with %s", request.method, request.url.path, exc.token)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.token})


async def data_access_failure_handler(request: Request, exc: DataAccessFailure) -> JSONResponse:
    logger.error(
        "%s %s failed in the data layer: %s", request.method, request.url.path, exc.description,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})


def create_app(container: Container | None = None) -> FastAPI:
    logging.basicConfig(level=settings.LOG_LEVEL)

    if container is None:
        # The production engine is only created when nothing else is supplied.
        from rocketfuel.database import async_session

        container = Container.build(async_session)

    app = FastAPI(
        title="rocket-fuel",
        description="Questions, answers and accepted answers, with chat notifications",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.container = container

    # Middleware
    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(WebFailure, web_failure_handler)
    app.add_exception_handler(DataAccessFailure, data_access_failure_handler)

    # Routers
    app.include_router(questions.router)
    app.include_router(answers.router)
    app.include_router(tags.router)

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": VERSION}

    return app
