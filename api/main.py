import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from core import db, errors, settings
from foods import router as foods_router
from nutrients import router as nutrients_router

settings.load_env()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process. The API still serves the
    # non-database routes when the database is unreachable.
    try:
        await db.init_pool()
    except Exception as exc:
        logger.error("database_pool_init_failed error=%s", exc)
    else:
        await db.check_connection()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

errors.install_handlers(app)

app.include_router(foods_router.router, tags=["foods"])
app.include_router(nutrients_router.router, tags=["nutrients"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "nutrient-catalog api"


@app.get("/db-test")
async def db_test():
    try:
        result = await db.fetch_value("SELECT 1 + 1 AS result")
    except Exception as exc:
        return JSONResponse(status_code=500, content=errors.error_body(str(exc)))
    return {"success": True, "result": result}


def run() -> None:
    logging.basicConfig(
        level=settings.log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=settings.server_port())


if __name__ == "__main__":
    run()
