"""
Whiskey Agent Ingestion Framework
=================================

This package provides the identity resolution pipeline that turns noisy
whiskey names from menus, photos and reviews into catalog entries.

Pipeline Stages:
1. Parse - Split store-pick / private-barrel designations from the base name
2. Normalize - Reduce the base name to a canonical key
3. Score - Edit and token similarity against prefix-scanned candidates
4. Judge - Consult a semantic judge for ambiguous near misses
5. Resolve - Match an existing whiskey or draft a new one
6. Persist - Create whiskeys and upsert bar availability facts
"""

from whiskey_agent.ingestion.catalog import (
    Catalog,
    InMemoryCatalog,
    SqlCatalog,
)
from whiskey_agent.ingestion.config import (
    AgentConfig,
    GlobalConfig,
    JudgeConfig,
    ResolutionConfig,
    get_default_config,
    load_config,
    reset_default_config,
)
from whiskey_agent.ingestion.judge import DedupJudge
from whiskey_agent.ingestion.normalizer import normalize_whiskey_name
from whiskey_agent.ingestion.orchestrator import (
    EntryFailure,
    IngestionOrchestrator,
    IngestionResult,
    ingest_menu,
)
from whiskey_agent.ingestion.picks import PickParse, parse_private_barrel
from whiskey_agent.ingestion.resolver import (
    MatchCandidate,
    ResolutionResult,
    WhiskeyResolver,
)
from whiskey_agent.ingestion.similarity import (
    levenshtein_distance,
    similarity_ratio,
    token_similarity,
)

__all__ = [
    # Catalog
    "Catalog",
    "InMemoryCatalog",
    "SqlCatalog",
    # Config
    "AgentConfig",
    "GlobalConfig",
    "JudgeConfig",
    "ResolutionConfig",
    "get_default_config",
    "load_config",
    "reset_default_config",
    # Judge
    "DedupJudge",
    # Normalizer
    "normalize_whiskey_name",
    # Picks
    "PickParse",
    "parse_private_barrel",
    # Similarity
    "levenshtein_distance",
    "similarity_ratio",
    "token_similarity",
    # Resolver
    "MatchCandidate",
    "ResolutionResult",
    "WhiskeyResolver",
    # Orchestrator
    "EntryFailure",
    "IngestionOrchestrator",
    "IngestionResult",
    "ingest_menu",
]
