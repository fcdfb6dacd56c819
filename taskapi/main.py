import argparse
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import Settings, settings as default_settings
from .logging_setup import setup_logging
from .routers import tasks
from .services.lifecycle import TaskManager
from .services.runner import StubRunner
from .services.spawner import Spawner, build_spawner
from .storage.base import Storage
from .storage.factory import build_storage

logger = logging.getLogger(__name__)


async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


def create_app(
    settings: Settings | None = None,
    storage: Storage | None = None,
    spawner: Spawner | None = None,
) -> FastAPI:
    settings = settings or default_settings
    if spawner is None and settings.spawner == "celery" and storage is None and settings.storage == "memory":
        raise ValueError("The celery spawner needs a shared storage backend (TASKAPI_STORAGE=redis)")

    manager = TaskManager(
        storage=storage if storage is not None else build_storage(settings),
        spawner=spawner if spawner is not None else build_spawner(settings.spawner),
        runner=StubRunner(settings.result_text),
        completion_delay=settings.completion_delay_seconds,
    )

    app = FastAPI(title="Task API", version="1.0.0", description="Asynchronous compile-and-run tasks.")
    app.state.manager = manager
    app.add_exception_handler(RequestValidationError, _bad_request)
    app.include_router(tasks.router)
    return app


app = create_app()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the task API server.")
    parser.add_argument("--addr", default=default_settings.addr, help="address for http server")
    args = parser.parse_args(argv)

    settings = default_settings.model_copy(update={"addr": args.addr})
    setup_logging(level=settings.log_level, log_file=settings.log_file)
    host, port = settings.host_port()

    logger.info("Starting server on %s", settings.addr)
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
