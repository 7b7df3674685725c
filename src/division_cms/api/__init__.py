"""
division_cms.api

API package for the division CMS service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, middleware and error mapping.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + auth + delegation to services.
