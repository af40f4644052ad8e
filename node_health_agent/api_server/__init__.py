"""
API server package: HTTP status-code health endpoint (FastAPI).
"""
