"""
division_cms.auth

Authentication/authorization package.

Responsibilities:
- Admin token signing and verification.
- FastAPI auth dependency resolving a token to a live admin record.
"""

# Package marker.
