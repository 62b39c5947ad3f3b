"""
Downloads module - signed, time-boxed download tokens.

This module handles:
- DownloadToken entity and issuance/verification
- Token rotation and the expired-token sweep
"""
