import os
import logging
from dotenv import load_dotenv

# Load environment variables before the engine reads its settings
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from api.router import router as engine_router
from table_engine.settings import get_engine_info

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Set up Sentry with logging integration
sentry_logging = LoggingIntegration(
    level=logging.INFO,        # Capture info and above as breadcrumbs
    event_level=logging.ERROR  # Send errors as events
)

sentry_sdk.init(
    dsn=os.environ.get("SENTRY_DSN"),
    integrations=[FastApiIntegration(), sentry_logging],
    traces_sample_rate=0.2,
)

# Initialize FastAPI app
app = FastAPI(title="Production Table Engine")

# Add compression middleware for large row snapshots
app.add_middleware(GZipMiddleware, minimum_size=1000)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(engine_router)

logger.info("Table engine configuration: %s", get_engine_info())


# Root route for API check
@app.get("/")
async def root():
    return {"status": "Production Table Engine API is running"}


# Dedicated health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring systems.
    Returns a 200 OK response if the service is healthy.
    """
    return {
        "status": "healthy",
        "version": os.environ.get("APP_VERSION", "development"),
        "engine": get_engine_info(),
    }
