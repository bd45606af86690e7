"""
TrustScore
==========

Computes a single trust score for a business from its most recent
Trustpilot reviews, weighted by review age.

Packages:
    data          - Configuration, models, errors, Trustpilot client
    reviews       - Pagination controller and score calculator
    orchestrator  - Aggregation engine, logging, CLI
    api           - FastAPI application
"""

__version__ = "1.0.0"
