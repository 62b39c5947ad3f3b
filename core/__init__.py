"""
Core module - pieces shared by every licensing app.

This module handles:
- Domain exception hierarchy, value objects and events
- Key derivation and HMAC helpers, clock and cache ports
- Correlation id and Prometheus middleware, health endpoints
"""
