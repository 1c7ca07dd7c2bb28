"""
CLI Module for fingerprint_reader

Provides command-line tools for talking to the fingerprint daemon:
- fprintctl: list readers, show properties, verify and enroll

Usage:
    python -m fingerprint_reader.cli.fprintctl info
    python -m fingerprint_reader.cli.fprintctl verify --finger right-index-finger
"""

from .fprintctl import main as fprintctl_main

__all__ = [
    'fprintctl_main',
]
