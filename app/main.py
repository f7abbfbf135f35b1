# app/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .catalog import CatalogService, ajax_router, catalog_router, register_actions
from .catalog.policy import AccessPolicy, CapabilityPolicy
from .catalog.store import load_sample_catalog
from .config import Settings, get_settings
from .storage import InMemoryRepository, Repository


logger = logging.getLogger(__name__)


def create_app(
    repository: Optional[Repository] = None,
    policy: Optional[AccessPolicy] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Catalogue de livres et d'auteurs : API REST et point d'entrée "
            "formulaire (AJAX) pour gérer les livres et leurs auteurs."
        ),
        version="1.0.0",
    )

    app.state.settings = settings
    repository = repository if repository is not None else InMemoryRepository()
    app.state.catalog = CatalogService(repository, policy or CapabilityPolicy())

    if settings.seed_file:
        load_sample_catalog(repository, settings.seed_file)

    register_actions()
    app.include_router(catalog_router)
    app.include_router(ajax_router)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError):
        # Malformed bodies and path ids are client errors like any other.
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    # 🔹 Route de base pour tester rapidement
    @app.get("/")
    def health_check():
        return {"status": "ok", "message": "Catalogue live 📚"}

    logger.info("Catalogue application ready")
    return app


app = create_app()
