"""Main entry point for running the FastAPI application."""
import uvicorn

from mentorsearch.config import settings

if __name__ == "__main__":
    print(f"Starting {settings.app_name} v{settings.version}")
    print(f"Debug mode: {settings.debug}")
    print(f"Database: {settings.db.url.split('@')[-1] if '@' in settings.db.url else settings.db.url}")
    print(f"Listening on: {settings.server.host}:{settings.server.port}")
    print("-" * 50)

    uvicorn.run(
        "mentorsearch.api:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.debug,
        reload_dirs=["mentorsearch", "ai", "config"] if settings.debug else None,
        log_level=settings.logging.level.lower(),
    )
