import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import LOG_LEVEL
from core.api import register_exception_handlers
from core.http.session import cleanup_session
from db import db_manager
from journal import router as journal_router
from mongodb_logging_handler import MongoDBHandler

load_dotenv()

# Basic logging configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# MongoDB logging handler will be added during startup
mongo_handler: MongoDBHandler | None = None

app = FastAPI(title="Journal Sync")

# CORS Middleware Configuration
cors_origins_str = os.getenv("CORS_ALLOWED_ORIGINS", "")
if cors_origins_str:
    origins = [
        origin.strip() for origin in cors_origins_str.split(",") if origin.strip()
    ]
    logger.info("CORS configured with specific origins: %s", origins)
else:
    origins = [
        "http://localhost:3000",
        "http://localhost:8080",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8080",
    ]
    logger.warning(
        "CORS_ALLOWED_ORIGINS not set. Using development defaults: %s",
        origins,
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(journal_router)

register_exception_handlers(app, logger)


# --- Application Lifecycle Events ---
@app.on_event("startup")
async def startup_event():
    """Initialize Beanie and the MongoDB log handler on application startup."""
    global mongo_handler

    try:
        await db_manager.init_beanie()
        logger.info("Database models initialized.")

        mongo_handler = MongoDBHandler(db_manager.db, "server_logs")
        await mongo_handler.setup_indexes()
        logging.getLogger().addHandler(mongo_handler)
        logger.info("MongoDB logging handler initialized and configured.")

        logger.info("Application startup completed successfully.")

    except Exception as e:
        logger.critical(
            "CRITICAL: Failed to initialize application during startup: %s",
            str(e),
            exc_info=True,
        )
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources when shutting down."""
    if mongo_handler is not None:
        logging.getLogger().removeHandler(mongo_handler)
    await cleanup_session()
    await db_manager.cleanup_connections()
    logger.info("Application shutdown completed successfully")


# --- Main Execution Block ---
if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8080"))
    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=port,
        log_level="info",
        reload=True,
    )
