"""
Factor correlation and relationship graph construction.

This module computes pairwise Pearson correlations between factor loading
vectors, counts the statements two factors jointly load on, and turns the
result into a typed, thresholded relationship graph.
"""

import logging
from typing import List

import numpy as np
import pandas as pd
from scipy import stats

from qfactormath.errors import ValidationError
from qfactormath.models import Factor, FactorNode, RelationshipEdge, RelationshipGraph
from qfactormath.math.loadings import loading_array, validate_factors
from qfactormath.math.stats import CORRELATION_CUTOFF, OPPOSITION_CUTOFF, SIGNIFICANT_LOADING

logger = logging.getLogger(__name__)


def check_filter_threshold(filter_threshold: float) -> float:
    """
    Reject filter thresholds outside [0, 1].

    Args:
        filter_threshold: Minimum edge strength

    Returns:
        The threshold as a float
    """
    try:
        value = float(filter_threshold)
    except (TypeError, ValueError):
        raise ValidationError(f"filter_threshold must be a number, got {filter_threshold!r}") from None

    if not 0.0 <= value <= 1.0:
        raise ValidationError(f"filter_threshold must lie in [0, 1], got {value}")

    return value


def factor_correlation(loadings1: np.ndarray, loadings2: np.ndarray) -> float:
    """
    Pearson correlation between two loading vectors.

    A constant vector has no variance, so its correlation with anything is 0.

    Args:
        loadings1: First loading vector
        loadings2: Second loading vector

    Returns:
        Correlation coefficient in [-1, 1]
    """
    x = np.asarray(loadings1, dtype=float)
    y = np.asarray(loadings2, dtype=float)

    if len(x) < 2 or len(y) < 2:
        return 0.0

    # Zero variance
    if np.all(x == x[0]) or np.all(y == y[0]):
        return 0.0

    corr, _ = stats.pearsonr(x, y)

    if np.isnan(corr):
        return 0.0

    return float(np.clip(corr, -1.0, 1.0))


def count_shared_statements(loadings1: np.ndarray,
                            loadings2: np.ndarray,
                            threshold: float = SIGNIFICANT_LOADING) -> int:
    """
    Count statements both factors load on significantly with the same sign.

    Args:
        loadings1: First loading vector
        loadings2: Second loading vector
        threshold: Magnitude a loading must exceed

    Returns:
        Number of shared statements
    """
    x = np.asarray(loadings1, dtype=float)
    y = np.asarray(loadings2, dtype=float)
    both = (np.abs(x) > threshold) & (np.abs(y) > threshold)
    return int(np.sum(both & (np.sign(x) == np.sign(y))))


def count_conflicting_statements(loadings1: np.ndarray,
                                 loadings2: np.ndarray,
                                 threshold: float = SIGNIFICANT_LOADING) -> int:
    """
    Count statements both factors load on significantly with opposite signs.

    Args:
        loadings1: First loading vector
        loadings2: Second loading vector
        threshold: Magnitude a loading must exceed

    Returns:
        Number of conflicting statements
    """
    x = np.asarray(loadings1, dtype=float)
    y = np.asarray(loadings2, dtype=float)
    both = (np.abs(x) > threshold) & (np.abs(y) > threshold)
    return int(np.sum(both & (np.sign(x) != np.sign(y))))


def edge_kind(corr: float) -> str:
    """
    Classify a correlation as correlation, opposition or neutral.

    Args:
        corr: Pearson correlation

    Returns:
        Edge kind
    """
    if corr > CORRELATION_CUTOFF:
        return 'correlation'
    if corr < OPPOSITION_CUTOFF:
        return 'opposition'
    return 'neutral'


def create_factor_nodes(factors: List[Factor],
                        significant_loading: float = SIGNIFICANT_LOADING) -> List[FactorNode]:
    """
    Build graph nodes for factors.

    Variance falls back to each factor's share of the total eigenvalue when
    variance_explained is not supplied.

    Args:
        factors: Factors
        significant_loading: Magnitude a loading must exceed to be counted

    Returns:
        One node per factor, in input order
    """
    total_eigenvalue = sum(f.eigenvalue for f in factors)

    nodes = []
    for factor in factors:
        if factor.variance_explained is not None:
            variance = factor.variance_explained
        elif total_eigenvalue > 0:
            variance = factor.eigenvalue / total_eigenvalue * 100
        else:
            variance = 0.0

        nodes.append(FactorNode(
            id=factor.id,
            label=f"Factor {factor.id}",
            eigenvalue=factor.eigenvalue,
            variance=variance,
            significant_loadings=sum(1 for l in factor.loadings if abs(l) > significant_loading)
        ))

    return nodes


def build_relationship_graph(factors: List[Factor],
                             filter_threshold: float = 0.3,
                             significant_loading: float = SIGNIFICANT_LOADING) -> RelationshipGraph:
    """
    Build the factor relationship graph.

    Every unordered factor pair is correlated; an edge is kept when the
    absolute correlation reaches filter_threshold.

    Args:
        factors: Factors with equal-length loading vectors
        filter_threshold: Minimum edge strength, in [0, 1]
        significant_loading: Magnitude cutoff for shared/conflicting counts

    Returns:
        RelationshipGraph with nodes in input order and edges in pair order
    """
    filter_threshold = check_filter_threshold(filter_threshold)

    if not factors:
        return RelationshipGraph()

    values = loading_array(factors)
    nodes = create_factor_nodes(factors, significant_loading)

    edges = []
    n = len(factors)
    for i in range(n):
        for j in range(i + 1, n):
            corr = factor_correlation(values[i], values[j])
            strength = abs(corr)

            logger.debug(f"Factors {factors[i].id}-{factors[j].id}: r={corr:.4f}")

            if strength < filter_threshold:
                continue

            edges.append(RelationshipEdge(
                factor_a=factors[i].id,
                factor_b=factors[j].id,
                correlation=corr,
                strength=strength,
                kind=edge_kind(corr),
                shared_count=count_shared_statements(values[i], values[j], significant_loading),
                conflicting_count=count_conflicting_statements(values[i], values[j], significant_loading)
            ))

    logger.info(f"Relationship graph: {len(nodes)} factors, {len(edges)} edges at threshold {filter_threshold}")

    return RelationshipGraph(nodes=nodes, edges=edges)


def correlation_matrix(factors: List[Factor]) -> pd.DataFrame:
    """
    Full factor-by-factor correlation matrix.

    Args:
        factors: Factors with equal-length loading vectors

    Returns:
        Symmetric DataFrame indexed by factor id, 1 on the diagonal
    """
    validate_factors(factors)
    ids = [f.id for f in factors]
    values = loading_array(factors)
    n = len(factors)

    corr = np.eye(n)
    for i in range(n):
        for j in range(i + 1, n):
            r = factor_correlation(values[i], values[j])
            corr[i, j] = r
            corr[j, i] = r

    return pd.DataFrame(
        corr,
        index=pd.Index(ids, name='factor'),
        columns=pd.Index(ids, name='factor')
    )
