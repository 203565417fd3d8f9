"""
Notification module for brand mention events.

This module defines the events raised when new mentions are stored or a
mention spike is detected, and the emitters that deliver them.
"""

__version__ = "0.1.0"
__author__ = "Brand Tracker Team"
