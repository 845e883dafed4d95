"""
The Scriptorium ASGI application.

Wires settings, logging, middleware, error handlers, the versioned API
routers and the avatar file mount into one FastAPI app. ``run`` starts it
under uvicorn for the ``scriptorium`` console script.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from scriptorium.core.database import async_session_maker, init_db, seed_admin
from scriptorium.core.logging_config import get_logger, setup_logging
from scriptorium.core.monitoring import initialize_logfire

from .api.v1 import (
    admin,
    auth,
    blog_posts,
    code_templates,
    comments,
    execution,
    health,
    reports,
    users,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware
from .services.uploads import UPLOADS_URL_PREFIX

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables and the seed administrator before serving."""
    # Startup
    logger.info("Starting up Scriptorium Server...")
    await init_db()
    logger.info("Database ready")
    async with async_session_maker() as session:
        await seed_admin(session)

    yield

    # Shutdown
    logger.info("Shutting down Scriptorium Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Scriptorium Server API

    A blogging platform for programmers: write blog posts, attach reusable code
    templates, run code in several languages, comment, vote and report content.
    Administrators moderate users and content.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth")
app.include_router(users.router, prefix=f"{constant.API_V1_STR}/users")
app.include_router(blog_posts.router, prefix=f"{constant.API_V1_STR}/blog-posts")
app.include_router(comments.router, prefix=f"{constant.API_V1_STR}/comments")
app.include_router(code_templates.router, prefix=f"{constant.API_V1_STR}/code-templates")
app.include_router(execution.router, prefix=f"{constant.API_V1_STR}/execute")
app.include_router(reports.router, prefix=f"{constant.API_V1_STR}/reports")
app.include_router(admin.router, prefix=f"{constant.API_V1_STR}/admin")

app.mount(
    UPLOADS_URL_PREFIX,
    StaticFiles(directory=Path(settings.uploads.directory), check_dir=False),
    name="uploads",
)


def run() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "scriptorium.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
