"""
Hosted applications module - the licensable Plugin, Theme and Software registry.

This module handles:
- HostedApp entity and its variants
- Resolution of an application by (type, slug)
"""
