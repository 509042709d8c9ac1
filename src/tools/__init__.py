"""
External signal integrations for the quote acceptance engine.

This module provides:
- Price recommenders: benchmark price ranges consumed by price scoring
"""

from .price_recommender import PriceRecommender, RuleBasedPriceRecommender

__all__ = ["PriceRecommender", "RuleBasedPriceRecommender"]
