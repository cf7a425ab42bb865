"""
Authentication Module - Black Box Interface

Purpose: Validate operator API keys
Interface: AuthModule.verify_api_key()
Hidden: Key formats, constant-time comparison, audit trail

This module can be replaced with any other auth implementation without
affecting the admission path, which does not use it.
"""

from .auth import AuthModule

__all__ = ["AuthModule"]
