"""
Distinguishing statement extraction for Q-methodology factors.

This module finds the statements that characterize each factor's viewpoint,
using z-score cutoffs to decide significance, and scores how unique and how
clear each factor's position is.
"""

import logging
from typing import Dict, List, Optional

import numpy as np

from qfactormath.errors import ValidationError
from qfactormath.models import DistinguishingStatement, Factor, FactorDistinction, Opposition, Statement
from qfactormath.math.loadings import loading_array, resolve_statements
from qfactormath.math.stats import (
    UNIQUE_BOOST, cutoff_for, significance_level, strength_adverb, z_to_percent
)
from qfactormath.utils.general import mean, sign

logger = logging.getLogger(__name__)

# Caps on list lengths
MAX_CORE_BELIEFS = 5
MAX_CONFLICTING_BELIEFS = 3

# 'exclusive': no other factor crosses the cutoff on the statement
# 'unopposed': no other factor crosses the cutoff with the opposite sign
UNIQUENESS_MODES = ('exclusive', 'unopposed')


def check_uniqueness_mode(mode: str) -> str:
    if mode not in UNIQUENESS_MODES:
        raise ValidationError(
            f"Unknown uniqueness mode: {mode!r} (expected one of {', '.join(UNIQUENESS_MODES)})"
        )
    return mode


def find_opposing_factors(values: np.ndarray,
                          factor_ids: List[int],
                          factor_idx: int,
                          stmt_idx: int,
                          cutoff: float) -> List[int]:
    """
    Factors that hold the opposite significant position on a statement.

    Args:
        values: k x n loading array
        factor_ids: Factor ids by row
        factor_idx: Row of the factor being analyzed
        stmt_idx: Statement column
        cutoff: Z-score cutoff

    Returns:
        Ids of opposing factors, in input order
    """
    z = values[factor_idx, stmt_idx]
    opposing = []
    for idx, factor_id in enumerate(factor_ids):
        if idx == factor_idx:
            continue
        other = values[idx, stmt_idx]
        if sign(other) != sign(z) and abs(other) >= cutoff:
            opposing.append(factor_id)
    return opposing


def find_sharing_factors(values: np.ndarray,
                         factor_ids: List[int],
                         factor_idx: int,
                         stmt_idx: int,
                         cutoff: float) -> List[int]:
    """Factors that hold the same significant position on a statement."""
    z = values[factor_idx, stmt_idx]
    sharing = []
    for idx, factor_id in enumerate(factor_ids):
        if idx == factor_idx:
            continue
        other = values[idx, stmt_idx]
        if sign(other) == sign(z) and abs(other) >= cutoff:
            sharing.append(factor_id)
    return sharing


def calculate_confidence(z: float, unique: bool) -> float:
    """
    Confidence in a distinguishing statement, 0-100.

    Unique statements get a 20% boost, still capped at 100.
    """
    confidence = z_to_percent(z)
    if unique:
        confidence *= UNIQUE_BOOST
    return min(100.0, confidence)


def generate_explanation(z: float,
                         opposing: List[int],
                         sharing: List[int],
                         unique: bool) -> str:
    """
    Sentence explaining a factor's position on a statement.

    Args:
        z: Factor z-score for the statement
        opposing: Opposing factor ids
        sharing: Factor ids holding the same position
        unique: Whether the statement is unique to the factor

    Returns:
        Explanation text
    """
    strength = strength_adverb(z)
    direction = 'agrees with' if z > 0 else 'disagrees with'
    lead = f"This factor {strength} {direction} this statement"

    if opposing:
        return f"{lead}, in contrast to factor(s) {', '.join(str(f) for f in opposing)}."
    if unique or not sharing:
        return f"{lead}, making it a unique distinguishing view."
    return f"{lead}, a view shared with factor(s) {', '.join(str(f) for f in sharing)}."


def extract_distinguishing_statements(values: np.ndarray,
                                      factor_ids: List[int],
                                      factor_idx: int,
                                      statements: List[Statement],
                                      cutoff: float,
                                      uniqueness: str = 'exclusive') -> List[DistinguishingStatement]:
    """
    Statements whose loading on a factor reaches the cutoff.

    Args:
        values: k x n loading array (z-scores)
        factor_ids: Factor ids by row
        factor_idx: Row of the factor being analyzed
        statements: Statements by column
        cutoff: Z-score cutoff; |z| >= cutoff qualifies
        uniqueness: 'exclusive' or 'unopposed'

    Returns:
        Distinguishing statements sorted by |z| descending
    """
    factor_id = factor_ids[factor_idx]
    result = []

    for stmt_idx, statement in enumerate(statements):
        z = float(values[factor_idx, stmt_idx])
        if abs(z) < cutoff:
            continue

        opposing = find_opposing_factors(values, factor_ids, factor_idx, stmt_idx, cutoff)
        sharing = find_sharing_factors(values, factor_ids, factor_idx, stmt_idx, cutoff)

        if uniqueness == 'exclusive':
            unique = not opposing and not sharing
        else:
            unique = not opposing

        result.append(DistinguishingStatement(
            statement_id=statement.id,
            statement_number=stmt_idx + 1,
            text=statement.text,
            factor_id=factor_id,
            z_score=z,
            significance=significance_level(z),
            unique_to_factor=unique,
            opposing_factors=opposing,
            sharing_factors=sharing,
            confidence=calculate_confidence(z, unique),
            explanation=generate_explanation(z, opposing, sharing, unique)
        ))

    # Stable sort keeps statement order among equal magnitudes
    return sorted(result, key=lambda s: abs(s.z_score), reverse=True)


def extract_core_beliefs(statements: List[DistinguishingStatement]) -> List[DistinguishingStatement]:
    """Highly significant or unique statements, at most five."""
    core = [s for s in statements if s.significance == 'high' or s.unique_to_factor]
    return core[:MAX_CORE_BELIEFS]


def opposition_intensity(statements: List[DistinguishingStatement]) -> float:
    """Mean |z| of the conflicting statements, mapped onto 0-100."""
    if not statements:
        return 0.0
    return z_to_percent(mean([abs(s.z_score) for s in statements]))


def find_oppositions(statements: List[DistinguishingStatement]) -> List[Opposition]:
    """
    Group distinguishing statements by opposing factor.

    Args:
        statements: Distinguishing statements, sorted by |z| descending

    Returns:
        Oppositions sorted by intensity descending
    """
    by_factor: Dict[int, List[DistinguishingStatement]] = {}
    for stmt in statements:
        for opposing in stmt.opposing_factors:
            by_factor.setdefault(opposing, []).append(stmt)

    oppositions = [
        Opposition(
            opposing_factor=opposing,
            conflicting_beliefs=[s.text for s in stmts[:MAX_CONFLICTING_BELIEFS]],
            intensity=opposition_intensity(stmts)
        )
        for opposing, stmts in by_factor.items()
    ]

    return sorted(oppositions, key=lambda o: o.intensity, reverse=True)


def uniqueness_score(statements: List[DistinguishingStatement]) -> float:
    """
    How much of a factor's view no one else holds, 0-100.

    Unique statements count double; highly significant ones count once.
    """
    if not statements:
        return 0.0
    unique_count = sum(1 for s in statements if s.unique_to_factor)
    high_count = sum(1 for s in statements if s.significance == 'high')
    return min(100.0, (unique_count * 2 + high_count) / len(statements) * 100)


def clarity_score(statements: List[DistinguishingStatement],
                  core_beliefs: List[DistinguishingStatement]) -> float:
    """
    How sharply a factor's view is defined, 0-100.

    70% average confidence, 30% core belief coverage.
    """
    if not statements:
        return 0.0
    avg_confidence = mean([s.confidence for s in statements])
    belief_ratio = min(len(core_beliefs), MAX_CORE_BELIEFS) / min(MAX_CORE_BELIEFS, len(statements))
    return min(100.0, avg_confidence * 0.7 + belief_ratio * 30)


def distinguish_factor(values: np.ndarray,
                       factor_ids: List[int],
                       factor_idx: int,
                       statements: List[Statement],
                       cutoff: float,
                       uniqueness: str = 'exclusive') -> FactorDistinction:
    """
    Full distinction record for one factor.

    Args:
        values: k x n loading array (z-scores)
        factor_ids: Factor ids by row
        factor_idx: Row of the factor being analyzed
        statements: Statements by column
        cutoff: Z-score cutoff
        uniqueness: 'exclusive' or 'unopposed'

    Returns:
        FactorDistinction
    """
    distinguishing = extract_distinguishing_statements(
        values, factor_ids, factor_idx, statements, cutoff, uniqueness
    )
    core_beliefs = extract_core_beliefs(distinguishing)

    return FactorDistinction(
        factor_id=factor_ids[factor_idx],
        distinguishing=distinguishing,
        core_beliefs=core_beliefs,
        oppositions=find_oppositions(distinguishing),
        uniqueness_score=uniqueness_score(distinguishing),
        clarity_score=clarity_score(distinguishing, core_beliefs)
    )


def extract_distinctions(factors: List[Factor],
                         statements: Optional[List[Statement]] = None,
                         threshold_level: str = 'moderate',
                         uniqueness: str = 'exclusive') -> List[FactorDistinction]:
    """
    Distinguishing statements and scores for every factor.

    Args:
        factors: Factors whose loadings are z-scores
        statements: Statements in loading order; placeholders if None
        threshold_level: 'strict', 'moderate' or 'inclusive'
        uniqueness: 'exclusive' or 'unopposed'

    Returns:
        One FactorDistinction per factor, in input order
    """
    cutoff = cutoff_for(threshold_level)
    check_uniqueness_mode(uniqueness)

    resolved = resolve_statements(statements, factors)
    if not factors:
        return []

    values = loading_array(factors)
    factor_ids = [f.id for f in factors]

    distinctions = []
    for idx in range(len(factors)):
        distinction = distinguish_factor(values, factor_ids, idx, resolved, cutoff, uniqueness)
        logger.debug(f"Factor {distinction.factor_id}: {len(distinction.distinguishing)} distinguishing, "
                     f"{distinction.unique_count} unique")
        distinctions.append(distinction)

    logger.info(f"Extracted distinguishing statements for {len(distinctions)} factors "
                f"at {threshold_level} (|z| >= {cutoff})")

    return distinctions
