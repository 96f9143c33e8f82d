"""
Knowledge Extractor: HTTP API
=============================

Endpoints:
- POST /analyze           -> analyze text and store the result
- GET  /search?topic=...  -> stored analyses matching a topic or keyword
- GET  /health            -> liveness and active storage dialect

The app holds no global state: services are built by the entry point
and handed to create_app().
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from knowledge_extractor.core.common.errors import ClientInputError, PersistenceError, ProviderError
from knowledge_extractor.features.analysis.service.api import AnalysisService
from knowledge_extractor.features.analysis.service.search import SearchService
from .schemas import AnalyzeRequest, AnalysisResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/health", response_model=HealthResponse)
def health_check(request: Request):
    """System status."""
    repo = request.app.state.search_service.repo
    return HealthResponse(status="online", storage=repo.dialect.value)


@router.post("/analyze", response_model=AnalysisResponse)
def analyze(payload: AnalyzeRequest, request: Request):
    service: AnalysisService = request.app.state.analysis_service
    analysis = service.analyze(payload.text)
    return AnalysisResponse.model_validate(analysis)


@router.get("/search", response_model=List[AnalysisResponse])
def search(request: Request, topic: Optional[str] = None):
    service: SearchService = request.app.state.search_service
    results = service.search(topic)
    return [AnalysisResponse.model_validate(a) for a in results]


# =============================================================================
# ERROR MAPPING
# =============================================================================

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": message})


async def _on_validation_error(request: Request, exc: RequestValidationError):
    # Malformed bodies are client errors, reported as 400 rather than 422
    return _error(400, "invalid input")


async def _on_client_error(request: Request, exc: ClientInputError):
    return _error(400, str(exc))


async def _on_provider_error(request: Request, exc: ProviderError):
    logger.error(f"LLM analysis failed: {exc}")
    return _error(500, f"LLM analysis failed: {exc}")


async def _on_persistence_error(request: Request, exc: PersistenceError):
    logger.error(f"Persistence failure on {request.url.path}: {exc}")
    return _error(500, str(exc))


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(analysis_service: AnalysisService, search_service: SearchService) -> FastAPI:
    app = FastAPI(
        title="Knowledge Extractor API",
        version="0.1.0",
        description="Analyze free text with an LLM and search the stored results"
    )

    app.state.analysis_service = analysis_service
    app.state.search_service = search_service

    app.add_exception_handler(RequestValidationError, _on_validation_error)
    app.add_exception_handler(ClientInputError, _on_client_error)
    app.add_exception_handler(ProviderError, _on_provider_error)
    app.add_exception_handler(PersistenceError, _on_persistence_error)

    app.include_router(router)
    return app
