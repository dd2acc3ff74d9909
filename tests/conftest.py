"""Shared pytest configuration for the Veritas tests."""
from __future__ import annotations

import os

# Provide provider settings before any veritas module is imported
os.environ.setdefault("REMOTE_OCR_PROVIDER", "mock")
os.environ.setdefault("LOCAL_OCR_PROVIDER", "mock")
os.environ.setdefault("REMOTE_SENTIMENT_PROVIDER", "mock")
os.environ.setdefault("LOCAL_SENTIMENT_PROVIDER", "mock")
os.environ.setdefault("REMOTE_TIMEOUT_SECONDS", "1.0")
