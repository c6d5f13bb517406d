"""
HTTP API.

Run with: uvicorn tarjoman.api.app:app --reload
"""
