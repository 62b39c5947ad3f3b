"""
Model registration for the downloads app.
"""
from downloads.infrastructure.models import DownloadToken  # noqa: F401
