"""
Brand Mention Collection Module

This module fetches brand mentions from news feeds, social platforms and
video search, normalizes them into a single shape and persists the
enriched results.
"""

__version__ = "0.1.0"
__author__ = "Brand Tracker Team"
