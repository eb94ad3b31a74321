"""
CrisisAI Responder - Backend Application Package

This package contains the service logic:
- Crisis classification and response plans
- API routes and schemas
- Session logging
- Upload handling
"""

__version__ = "1.0.0"
