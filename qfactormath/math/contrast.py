"""
Pairwise contrast between two factors' distinguishing statements.
"""

import logging
from typing import List

import numpy as np
import pandas as pd

from qfactormath.models import Agreement, ContrastResult, Disagreement, FactorDistinction
from qfactormath.utils.general import sign

logger = logging.getLogger(__name__)

NO_DIFFERENCE = 'No major differences found'


def contrast_factors(first: FactorDistinction, second: FactorDistinction) -> ContrastResult:
    """
    Compare two factors on the statements both find distinguishing.

    Same-sign statements are agreements, opposite-sign statements are
    disagreements. Statements distinguishing only one factor are ignored.

    Args:
        first: Distinction record of the first factor
        second: Distinction record of the second factor

    Returns:
        ContrastResult with agreements sorted by strength and disagreements
        by gap, both descending
    """
    second_by_id = {s.statement_id: s for s in second.distinguishing}

    agreements = []
    disagreements = []

    for stmt in first.distinguishing:
        other = second_by_id.get(stmt.statement_id)
        if other is None:
            continue

        if sign(stmt.z_score) == sign(other.z_score):
            agreements.append(Agreement(
                statement_id=stmt.statement_id,
                text=stmt.text,
                strength=min(abs(stmt.z_score), abs(other.z_score))
            ))
        else:
            disagreements.append(Disagreement(
                statement_id=stmt.statement_id,
                text=stmt.text,
                z_a=stmt.z_score,
                z_b=other.z_score,
                gap=abs(stmt.z_score - other.z_score)
            ))

    agreements.sort(key=lambda a: a.strength, reverse=True)
    disagreements.sort(key=lambda d: d.gap, reverse=True)

    total = len(agreements) + len(disagreements)
    similarity = len(agreements) / total * 100 if total > 0 else 0.0

    logger.debug(f"Contrast {first.factor_id} vs {second.factor_id}: "
                 f"{len(agreements)} agreements, {len(disagreements)} disagreements")

    return ContrastResult(
        factor_a=first.factor_id,
        factor_b=second.factor_id,
        agreements=agreements,
        disagreements=disagreements,
        overall_similarity=similarity,
        key_difference=disagreements[0].text if disagreements else NO_DIFFERENCE
    )


def contrast_matrix(distinctions: List[FactorDistinction]) -> pd.DataFrame:
    """
    Overall similarity for every factor pair.

    Args:
        distinctions: Distinction records

    Returns:
        Symmetric DataFrame indexed by factor id, 100 on the diagonal
    """
    ids = [d.factor_id for d in distinctions]
    n = len(distinctions)

    similarity = np.full((n, n), 100.0)
    for i in range(n):
        for j in range(i + 1, n):
            value = contrast_factors(distinctions[i], distinctions[j]).overall_similarity
            similarity[i, j] = value
            similarity[j, i] = value

    return pd.DataFrame(
        similarity,
        index=pd.Index(ids, name='factor'),
        columns=pd.Index(ids, name='factor')
    )
