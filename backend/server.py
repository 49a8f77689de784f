from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from core.config import MONGO_URL, DB_NAME, CORS_ORIGINS
from core.database import create_client, create_database_indexes
from core.responses import register_exception_handlers
from routes import health_router, guests_router, rsvp_router, wedding_router
from services.wedding import load_wedding_data

logger = logging.getLogger(__name__)


def create_app(database=None, wedding_data=None) -> FastAPI:
    """
    Build the API. The database handle is opened here (or injected, e.g. by
    tests) and handed to every request through app.state.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup/shutdown"""
        client = None
        if database is None:
            logger.info(f"Connecting to MongoDB database {DB_NAME}")
            client = create_client(MONGO_URL)
            app.state.db = client[DB_NAME]
        else:
            app.state.db = database
        app.state.wedding_data = wedding_data or load_wedding_data()

        # Slug uniqueness relies on these indexes
        await create_database_indexes(app.state.db)
        logger.info("Wedding guest API started")
        yield
        if client is not None:
            client.close()
            logger.info("MongoDB connection closed")

    app = FastAPI(title="Wedding Guest API", lifespan=lifespan)

    app.include_router(health_router)
    app.include_router(guests_router)
    app.include_router(rsvp_router)
    app.include_router(wedding_router)

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_credentials=True,
        allow_origins=CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()
