"""Core domain package for heartline.

Core contains sanitizing, language inference, validation, fingerprinting and
summary key logic without any storage or transport-specific code, keeping the
heartbeat rules portable.
"""
