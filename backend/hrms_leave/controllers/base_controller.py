"""
Base controller class.
Controllers turn API requests into service calls and return Pydantic schemas.
"""

from abc import ABC


class BaseController(ABC):
    """Base class for leave engine controllers."""
    pass
