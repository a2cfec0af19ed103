import logging

from fastapi import FastAPI

from app.routers import auth, posts
from app.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Church Blog API",
    description="Blog posts stored as Markdown files in a GitHub repository",
)

app.include_router(posts.router)
app.include_router(auth.router)

logger.info(
    f"Serving posts from {settings.GITHUB_OWNER}/{settings.GITHUB_REPO}:{settings.POSTS_PATH}"
)


@app.get("/")
async def root():
    return {"message": "Church Blog API is running"}
