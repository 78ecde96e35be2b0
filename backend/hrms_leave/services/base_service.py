"""
Base service class.
Services hold the leave rules and coordinate the HR backend repositories.
"""

from abc import ABC


class BaseService(ABC):
    """Base class for leave engine services."""
    pass
