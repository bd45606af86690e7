"""
TrustScore Orchestrator
=======================

Runs a trust score lookup end to end and hosts the process entry points.

Components:
    - TrustScoreEngine: resolve -> fetch pages -> score -> result
    - setup_logging: Console / JSON / rotating-file logging
    - cli: argparse command-line interface
"""

from .engine import TrustScoreEngine, build_engine, get_trust_score
from .logging_config import setup_logging, JSONFormatter

__all__ = [
    "TrustScoreEngine",
    "build_engine",
    "get_trust_score",
    "setup_logging",
    "JSONFormatter",
]
