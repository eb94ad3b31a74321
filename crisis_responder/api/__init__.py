"""
CrisisAI Responder - API Package

REST routes and their Pydantic schemas.
"""
