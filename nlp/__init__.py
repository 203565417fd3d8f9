"""
Natural Language Processing & Mention Enrichment Module

This module assigns sentiment, keywords and a category to every
ingested mention using a word-valence lexicon, frequency counting and
ordered keyword patterns.
"""

__version__ = "0.1.0"
__author__ = "Brand Tracker Team"
