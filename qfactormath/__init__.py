"""
Qfactormath package for Q-methodology factor interpretation.

Computes how the factors of a finished Q-methodology analysis relate to
each other and which statements distinguish each factor's viewpoint.
"""

__version__ = '0.1.0'

from qfactormath.errors import QFactorMathError, DataInconsistency, ValidationError, FactorNotFound
from qfactormath.models import Factor, Statement
from qfactormath.components.config import Config, ConfigManager
from qfactormath.interpretation import (
    analyze_interactions, factor_details, analyze_distinctions
)
