"""synccheck — schema-portability validator for persistence models.

Service responsibilities:
  1. Validate model declarations supplied as raw member records
  2. Validate model classes found in Python source
  3. Report diagnostics with stable identities for suppression

No persistence. Every request is validated independently.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from synccheck.config import get_settings
from synccheck.routers import validation

VERSION = "0.1.0"


def create_app() -> FastAPI:
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        version=VERSION,
        description=(
            "Checks persistence model declarations against the rules a "
            "remote-sync backend requires.\n\n"
            "Attributes must be optional or carry a default value; "
            "relationships must be optional."
        ),
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Model validation (stateless) ───
    application.include_router(
        validation.router, prefix="/api/validation", tags=["Validation"]
    )

    @application.get("/health")
    async def health_check():
        return {"status": "ok", "service": settings.app_name, "version": VERSION}

    return application


app = create_app()
