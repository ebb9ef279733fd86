"""
Statistical constants and helpers for factor interpretation.

Distinguishing statements are selected by comparing factor z-scores against
two-tailed normal cutoffs.
"""

from typing import Dict

from qfactormath.errors import ValidationError


# Z-score cutoffs
Z_90 = 1.645  # p < 0.10
Z_95 = 1.96   # p < 0.05
Z_99 = 2.58   # p < 0.01

THRESHOLD_LEVELS: Dict[str, float] = {
    'strict': Z_99,
    'moderate': Z_95,
    'inclusive': Z_90,
}

# Correlation bands for relationship edges
CORRELATION_CUTOFF = 0.5
OPPOSITION_CUTOFF = -0.3

# Clusters only follow correlation edges stronger than this
STRONG_CORRELATION = 0.5

# Loadings above this magnitude count toward shared/conflicting statements
SIGNIFICANT_LOADING = 0.4

# Confidence reaches 100 at this |z|
CONFIDENCE_SCALE = 4.0
UNIQUE_BOOST = 1.2


def cutoff_for(level: str) -> float:
    """
    Look up the z-score cutoff for a threshold level.
    
    Args:
        level: 'strict', 'moderate' or 'inclusive'
        
    Returns:
        Z-score cutoff
    """
    try:
        return THRESHOLD_LEVELS[level]
    except KeyError:
        raise ValidationError(
            f"Unknown threshold level: {level!r} (expected one of {', '.join(THRESHOLD_LEVELS)})"
        ) from None


def z_score_sig_90(z: float) -> bool:
    """True if |z| is significant at the 90% level."""
    return abs(z) >= Z_90


def z_score_sig_95(z: float) -> bool:
    """True if |z| is significant at the 95% level."""
    return abs(z) >= Z_95


def z_score_sig_99(z: float) -> bool:
    """True if |z| is significant at the 99% level."""
    return abs(z) >= Z_99


def significance_level(z: float) -> str:
    """
    Bucket a z-score into a significance label.
    
    Args:
        z: Z-score (sign ignored)
        
    Returns:
        'high', 'medium' or 'low'
    """
    if z_score_sig_99(z):
        return 'high'
    if z_score_sig_95(z):
        return 'medium'
    return 'low'


def strength_adverb(z: float) -> str:
    """Adverb describing how strongly a factor holds a position."""
    if z_score_sig_99(z):
        return 'strongly'
    if z_score_sig_95(z):
        return 'moderately'
    return 'somewhat'


def z_to_percent(z: float) -> float:
    """Map |z| onto 0-100, saturating at CONFIDENCE_SCALE."""
    return min(100.0, (abs(z) / CONFIDENCE_SCALE) * 100.0)
