"""
Activations module - the license activation protocol.

This module handles:
- Per-domain secret provisioning and verification
- Activate, deactivate and uninstall handlers
- Download token validity test and re-authentication
"""
