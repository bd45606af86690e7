"""TrustScore HTTP API."""
