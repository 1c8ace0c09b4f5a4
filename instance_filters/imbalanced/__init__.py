"""
Imbalanced dataset handling module for instance_filters.

This module provides filters that rebalance or clean the classes of a dataset.
"""

from .samplers import RandomOverSampler, find_minority_majority
from .cleaning import EditedNearestNeighbours, is_outvoted

__all__ = [
    # Samplers
    'RandomOverSampler',
    'find_minority_majority',

    # Cleaning
    'EditedNearestNeighbours',
    'is_outvoted',
]
