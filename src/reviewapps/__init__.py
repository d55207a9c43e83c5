"""
review-apps - Fly.io review apps for pull requests
"""

__version__ = "1.0.0"

from .core import ReviewAppManager, ReviewAppError

__all__ = ["ReviewAppManager", "ReviewAppError"]
