"""
Distinguishing view analysis.

Runs distinguishing-statement extraction for every factor and provides the
views built on top of it: the distinction matrix, key insights, and
on-demand contrasts between two factors.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from qfactormath.components.config import Config, ConfigManager
from qfactormath.errors import FactorNotFound
from qfactormath.models import (
    ContrastResult, Factor, FactorDistinction, Record, Statement, ThresholdLevel
)
from qfactormath.math.contrast import contrast_factors, contrast_matrix
from qfactormath.math.distinguishing import check_uniqueness_mode, extract_distinctions
from qfactormath.math.loadings import load_factors, load_statements
from qfactormath.math.stats import cutoff_for
from qfactormath.utils.general import mean

logger = logging.getLogger(__name__)

DISTINCTION_COLUMNS = ['distinguishing', 'unique', 'core_beliefs', 'oppositions', 'uniqueness', 'clarity']


class DistinctionAnalysis(Record):
    """Distinguishing statements for every factor at one threshold level."""

    threshold_level: ThresholdLevel
    cutoff: float
    distinctions: List[FactorDistinction]

    def get(self, factor_id: int) -> FactorDistinction:
        for distinction in self.distinctions:
            if distinction.factor_id == factor_id:
                return distinction
        raise FactorNotFound(factor_id)

    def compare(self, factor_a: int, factor_b: int) -> ContrastResult:
        """Contrast two factors of this analysis."""
        return contrast_factors(self.get(factor_a), self.get(factor_b))

    def contrast_matrix(self) -> pd.DataFrame:
        return contrast_matrix(self.distinctions)

    def distinction_matrix(self) -> pd.DataFrame:
        """
        Per-factor counts and scores, one row per factor.

        Returns:
            DataFrame indexed by factor id
        """
        rows = [
            {
                'distinguishing': len(d.distinguishing),
                'unique': d.unique_count,
                'core_beliefs': len(d.core_beliefs),
                'oppositions': len(d.oppositions),
                'uniqueness': d.uniqueness_score,
                'clarity': d.clarity_score,
            }
            for d in self.distinctions
        ]
        return pd.DataFrame(
            rows,
            index=pd.Index([d.factor_id for d in self.distinctions], name='factor'),
            columns=DISTINCTION_COLUMNS
        )

    def key_insights(self) -> Dict[str, Any]:
        """
        Headline numbers across all factors.

        The most distinguishing factor is the one with the highest
        uniqueness score; ties go to the earliest factor.
        """
        if not self.distinctions:
            return {
                'unique_views': 0,
                'max_oppositions': 0,
                'average_clarity': 0.0,
                'most_distinguishing_factor': None,
                'most_distinguishing_unique_count': 0,
            }

        top = max(self.distinctions, key=lambda d: d.uniqueness_score)
        return {
            'unique_views': sum(d.unique_count for d in self.distinctions),
            'max_oppositions': max(len(d.oppositions) for d in self.distinctions),
            'average_clarity': mean([d.clarity_score for d in self.distinctions]),
            'most_distinguishing_factor': top.factor_id,
            'most_distinguishing_unique_count': top.unique_count,
        }


def analyze_distinctions(factors: List[Union[Factor, Dict[str, Any]]],
                         statements: Optional[List[Union[Statement, Dict[str, Any], str]]] = None,
                         threshold_level: Optional[str] = None,
                         config: Optional[Config] = None) -> DistinctionAnalysis:
    """
    Run distinguishing-statement extraction for every factor.

    Args:
        factors: Factor records or raw dictionaries; loadings are z-scores
        statements: Statements in loading order; placeholders if None
        threshold_level: 'strict', 'moderate' or 'inclusive'; defaults to
            the configured value
        config: Configuration; defaults to the shared instance

    Returns:
        DistinctionAnalysis
    """
    config = (config or ConfigManager.get_config()).validate()
    level = config.threshold_level if threshold_level is None else threshold_level
    cutoff = cutoff_for(level)
    uniqueness = check_uniqueness_mode(config.uniqueness)

    factors = load_factors(factors)
    statements = load_statements(statements)

    start_time = time.time()
    logger.info(f"Analyzing distinguishing views for {len(factors)} factors at {level}")

    distinctions = extract_distinctions(factors, statements, level, uniqueness)

    logger.info(f"Distinguishing view analysis completed in {time.time() - start_time:.2f}s")

    return DistinctionAnalysis(
        threshold_level=level,
        cutoff=cutoff,
        distinctions=distinctions
    )
