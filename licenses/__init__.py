"""
Licenses module - License entity and lifecycle management.

This module handles:
- License entity, status derivation and domain quota
- License key generation and regeneration
- Issue, status change, delete and listing handlers
"""
