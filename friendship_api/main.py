import logging

from .common import app
from .config import settings
from .routers.friends.endpoints import router as FriendsEndpoints

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Include routers
app.include_router(FriendsEndpoints)

@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}
