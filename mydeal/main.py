from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mydeal.api.v1 import routes
from mydeal.core.config import settings
from mydeal.core.logging_config import logger
from mydeal.db.seed import seed_demo_data
from mydeal.db.store import get_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.SEED_DEMO_DATA:
        seed_demo_data(get_store())
    logger.info("My Deal marketplace started")
    yield


app = FastAPI(title="My Deal marketplace", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(routes.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("mydeal.main:app", host="0.0.0.0", port=settings.APP_PORT)
