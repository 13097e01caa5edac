"""Plans module - read-only training plan configuration.

This module provides:
- TrainingPlan schema and category targets
- The light / expert / superhuman catalogue
- Training capacity and dynamic optimal range
"""

from cogload.plans.capacity import dynamic_optimal_range, initial_training_capacity, update_training_capacity
from cogload.plans.catalog import TRAINING_PLANS, get_training_plan
from cogload.plans.types import Category, CategoryTargets, OptimalRange, TrainingPlan

__all__ = [
    "TRAINING_PLANS",
    "Category",
    "CategoryTargets",
    "OptimalRange",
    "TrainingPlan",
    "dynamic_optimal_range",
    "get_training_plan",
    "initial_training_capacity",
    "update_training_capacity",
]
