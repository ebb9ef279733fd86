"""
Interpretation pipelines for qfactormath.

This module chains the core algorithms into complete runs over a factor
set: factor interactions and distinguishing views.
"""

from qfactormath.interpretation.interaction import (
    InteractionAnalysis, FactorDetails, analyze_interactions, factor_details
)
from qfactormath.interpretation.distinction import DistinctionAnalysis, analyze_distinctions
