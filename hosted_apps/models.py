"""
Model registration for the hosted_apps app.
"""
from hosted_apps.infrastructure.models import Plugin, Software, Theme  # noqa: F401
