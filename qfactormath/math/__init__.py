"""
Core algorithms for factor interpretation.

This module contains implementations of:
- Factor relationship graph (pairwise correlation)
- Cluster detection over strong correlations
- Interaction pattern classification
- Network metrics
- Distinguishing statement extraction
- Pairwise factor contrast
"""

from qfactormath.math.corr import build_relationship_graph, correlation_matrix
from qfactormath.math.clusters import detect_clusters
from qfactormath.math.patterns import classify_patterns
from qfactormath.math.network import network_metrics, network_health
from qfactormath.math.distinguishing import extract_distinctions
from qfactormath.math.contrast import contrast_factors, contrast_matrix

__all__ = [
    'build_relationship_graph',
    'correlation_matrix',
    'detect_clusters',
    'classify_patterns',
    'network_metrics',
    'network_health',
    'extract_distinctions',
    'contrast_factors',
    'contrast_matrix',
]
