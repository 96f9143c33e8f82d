# File: knowledge_extractor/core/database/base.py

from sqlalchemy.orm import declarative_base

# The shared registry. Both storage dialects build the same tables from it.
Base = declarative_base()
