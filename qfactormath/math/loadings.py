"""
Loading matrix construction and input validation.

This is the ingestion boundary: raw factor and statement records are turned
into validated Factor/Statement objects here, and the factor set is checked
for consistency before any computation runs.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

import numpy as np
import pandas as pd
from pydantic import ValidationError as PydanticValidationError

from qfactormath.errors import DataInconsistency, ValidationError
from qfactormath.models import Factor, Statement
from qfactormath.utils.general import duplicates

logger = logging.getLogger(__name__)


def load_factors(raw: Iterable[Union[Factor, Dict[str, Any]]]) -> List[Factor]:
    """
    Build Factor records from raw dictionaries.

    Args:
        raw: Factor objects or dictionaries with id, eigenvalue,
            variance_explained and loadings

    Returns:
        List of validated factors, in input order
    """
    factors = []
    for i, item in enumerate(raw):
        if isinstance(item, Factor):
            factors.append(item)
            continue

        data = dict(item)
        # Accept the camelCase name used by upstream exports
        if 'varianceExplained' in data and 'variance_explained' not in data:
            data['variance_explained'] = data.pop('varianceExplained')

        try:
            factors.append(Factor.model_validate(data))
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid factor record at position {i}: {e}") from e

    return factors


def load_statements(raw: Optional[Iterable[Union[Statement, Dict[str, Any], str]]]) -> Optional[List[Statement]]:
    """
    Build Statement records from raw input.

    Plain strings are numbered from 1 in order.

    Args:
        raw: Statement objects, dictionaries with id and text, or strings

    Returns:
        List of validated statements, or None if raw is None
    """
    if raw is None:
        return None

    statements = []
    for i, item in enumerate(raw):
        if isinstance(item, Statement):
            statements.append(item)
        elif isinstance(item, str):
            statements.append(Statement(id=str(i + 1), text=item))
        else:
            data = dict(item)
            if 'id' in data and data['id'] is not None:
                data['id'] = str(data['id'])
            try:
                statements.append(Statement.model_validate(data))
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid statement record at position {i}: {e}") from e

    return statements


def validate_factors(factors: List[Factor]) -> int:
    """
    Check that a factor set describes one statement set.

    Args:
        factors: Factors to check

    Returns:
        Number of statements (0 for an empty factor list)
    """
    if not factors:
        return 0

    dupes = duplicates(f.id for f in factors)
    if dupes:
        raise DataInconsistency("Duplicate factor ids", dupes)

    n_statements = len(factors[0].loadings)
    mismatched = [f.id for f in factors if len(f.loadings) != n_statements]
    if mismatched:
        raise DataInconsistency(
            f"Loading sequences differ in length from factor {factors[0].id} ({n_statements} statements)",
            mismatched
        )

    return n_statements


def resolve_statements(statements: Optional[List[Statement]],
                       factors: List[Factor]) -> List[Statement]:
    """
    Line statements up with factor loadings.

    When no statements are supplied, placeholders "Statement {n}" are used.

    Args:
        statements: Statements in loading order, or None
        factors: Validated factors

    Returns:
        One statement per loading position
    """
    n_statements = validate_factors(factors)

    if statements is None:
        return [Statement(id=str(i + 1), text=f"Statement {i + 1}") for i in range(n_statements)]

    if factors and len(statements) != n_statements:
        raise DataInconsistency(
            f"Loadings index {n_statements} statements but {len(statements)} were supplied",
            [f.id for f in factors]
        )

    dupes = duplicates(s.id for s in statements)
    if dupes:
        raise DataInconsistency(f"Duplicate statement ids: {', '.join(dupes)}")

    return list(statements)


def loading_array(factors: List[Factor]) -> np.ndarray:
    """
    Stack factor loadings into a k x n array.

    Args:
        factors: Validated factors

    Returns:
        Array with one row per factor
    """
    n_statements = validate_factors(factors)
    if not factors:
        return np.zeros((0, 0))
    return np.array([f.loadings for f in factors], dtype=float).reshape(len(factors), n_statements)


def loading_matrix(factors: List[Factor],
                   statements: Optional[List[Statement]] = None) -> pd.DataFrame:
    """
    Loadings as a DataFrame with factor ids as rows and statement ids as columns.

    Args:
        factors: Factors
        statements: Optional statements in loading order

    Returns:
        DataFrame of loadings
    """
    resolved = resolve_statements(statements, factors)
    values = loading_array(factors)

    logger.debug(f"Loading matrix: {values.shape[0]} factors x {values.shape[1]} statements")

    return pd.DataFrame(
        values,
        index=pd.Index([f.id for f in factors], name='factor'),
        columns=pd.Index([s.id for s in resolved], name='statement')
    )
