"""
division_cms.services

Service layer package.

Responsibilities:
- Own transactions and authorization around repository calls.
"""

# Package marker.
