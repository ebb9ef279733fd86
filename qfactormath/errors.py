"""
Exceptions raised by qfactormath.
"""

from typing import Iterable, List, Optional


class QFactorMathError(Exception):
    """Base class for all qfactormath errors."""


class DataInconsistency(QFactorMathError):
    """
    Input factors do not describe one consistent statement set.
    
    Raised for unequal loading lengths, duplicate factor ids, or a statement
    list that does not line up with the loadings. The whole batch is rejected.
    """
    
    def __init__(self, message: str, factor_ids: Optional[Iterable[int]] = None):
        self.factor_ids: List[int] = list(factor_ids) if factor_ids is not None else []
        if self.factor_ids:
            message = f"{message} (factors: {', '.join(str(f) for f in self.factor_ids)})"
        super().__init__(message)


class ValidationError(QFactorMathError, ValueError):
    """Configuration or raw record failed validation before computation."""


class FactorNotFound(QFactorMathError, KeyError):
    """A factor id was looked up that is not part of the analysis."""
    
    def __init__(self, factor_id):
        self.factor_id = factor_id
        super().__init__(f"Unknown factor id: {factor_id}")
    
    def __str__(self) -> str:
        return self.args[0]
