"""REST API for report schedules and form submissions (FastAPI)."""

from safety_spine.api.app import create_app

__all__ = ["create_app"]
