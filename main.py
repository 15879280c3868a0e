import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

import billing_route
import dashboard_route
import reports_route
from archiver import monthly_close_loop
from clock import Clock, system_clock
from config import Settings
from db import init_db, make_engine
from locks import RecordLocks
from logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(
  settings: Optional[Settings] = None,
  engine: Optional[Engine] = None,
  clock: Clock = system_clock,
) -> FastAPI:
  settings = settings or Settings.from_env()
  configure_logging(settings.log_level, settings.log_file)

  if engine is None:
    engine = make_engine(settings.database_url, echo=settings.sql_echo)
  init_db(engine)
  locks = RecordLocks()

  @asynccontextmanager
  async def lifespan(app: FastAPI):
    task = None
    if settings.monthly_close_enabled:
      task = asyncio.create_task(monthly_close_loop(engine, clock, locks))
    yield
    if task:
      task.cancel()
      with suppress(asyncio.CancelledError):
        await task

  app = FastAPI(title="Customer Billing Backend", version="1.0.0", lifespan=lifespan)
  app.state.engine = engine
  app.state.clock = clock
  app.state.locks = locks

  app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
  )

  @app.exception_handler(RequestValidationError)
  async def validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(
      status_code=400,
      content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )

  @app.exception_handler(StarletteHTTPException)
  async def http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
      # routes raise fastapi's subclass with a message; the router itself raises the bare one
      body = exc.detail if exc.__class__ is not StarletteHTTPException else "404 Page Not Found"
      return PlainTextResponse(body, status_code=404)
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

  @app.exception_handler(SQLAlchemyError)
  async def database_error(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": str(exc)}, status_code=500)

  @app.exception_handler(Exception)
  async def unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Something went wrong!"}, status_code=500)

  @app.get("/", response_class=PlainTextResponse)
  def root():
    return "Customer Service Running"

  app.include_router(billing_route.router)
  app.include_router(dashboard_route.router)
  app.include_router(reports_route.router)
  return app


app = create_app()


if __name__ == "__main__":
  s = Settings.from_env()
  uvicorn.run("main:app", host=s.host, port=s.port)
