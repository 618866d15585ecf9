"""FastAPI sidecar exposing the cadence player."""
