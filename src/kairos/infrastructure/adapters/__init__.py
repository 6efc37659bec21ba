# Infrastructure Adapters Package
from .json_repository import JsonCardRepository

__all__ = ["JsonCardRepository"]
