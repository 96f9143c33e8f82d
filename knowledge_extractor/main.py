import logging

import uvicorn

from knowledge_extractor.api.server import create_app
from knowledge_extractor.core.config.settings import Settings
from knowledge_extractor.core.database.connection import connect, provision_schema
from knowledge_extractor.features.analysis.data.repository import build_repository
from knowledge_extractor.features.analysis.service.api import AnalysisService
from knowledge_extractor.features.analysis.service.search import SearchService
from knowledge_extractor.features.intelligence.service.api import build_llm_adapter

logger = logging.getLogger(__name__)


def main() -> None:
    settings = Settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )

    # 1. Storage: Postgres if reachable, SQLite otherwise
    handle = connect(settings.DATABASE_URL, settings.SQLITE_PATH)
    provision_schema(handle)
    repo = build_repository(handle)

    # 2. Provider: stub, or remote with stub fallback
    llm = build_llm_adapter(settings)

    # 3. Wire services into the HTTP app
    app = create_app(
        analysis_service=AnalysisService(llm=llm, repo=repo),
        search_service=SearchService(repo=repo)
    )

    logger.info(f"Server running on port {settings.PORT}")
    try:
        uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
    finally:
        handle.dispose()


if __name__ == "__main__":
    main()
