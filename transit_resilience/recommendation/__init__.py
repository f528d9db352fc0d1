"""
Recommendation Package

Candidate link generation and greedy budget-constrained selection.
"""

from .models import (
    CandidateStrategy,
    CandidateLink,
    LinkProfile,
    Recommendation,
    ProgressUpdate,
    RecommendationResult,
)
from .candidates import CandidateGenerator, generate_candidates, haversine_km
from .greedy import GreedyRecommender, greedy_recommendation, link_profile, insert_link

__all__ = [
    "CandidateStrategy",
    "CandidateLink",
    "LinkProfile",
    "Recommendation",
    "ProgressUpdate",
    "RecommendationResult",
    "CandidateGenerator",
    "generate_candidates",
    "haversine_km",
    "GreedyRecommender",
    "greedy_recommendation",
    "link_profile",
    "insert_link",
]
