"""
Test Suite Module

This module contains all tests for the Brand Tracker system,
including unit tests, integration tests, and test utilities.
"""

__version__ = "0.1.0"
__author__ = "Brand Tracker Team"
