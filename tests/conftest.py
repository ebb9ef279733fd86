"""
Pytest configuration and fixtures for qfactormath tests.

This module provides:
- Reset of the shared configuration between tests
- Factor sets for the reference scenarios
- A factory for hand-built relationship graphs
"""

import os
import sys

import pytest

# Add the parent directory to the path to import the package
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from qfactormath.components.config import ConfigManager
from qfactormath.models import Factor, FactorNode, RelationshipEdge, RelationshipGraph, Statement
from qfactormath.math.corr import edge_kind


# Two factors with z-score loadings over five statements
LOADINGS_A = [2.7, -0.4, 0.2, 2.3, -2.6]
LOADINGS_B = [2.5, 0.3, -0.1, -2.4, 2.6]


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Isolate tests from the shared config instance and QFM_* variables."""
    for name in ('QFM_FILTER_THRESHOLD', 'QFM_SIGNIFICANT_LOADING', 'QFM_THRESHOLD_LEVEL',
                 'QFM_UNIQUENESS', 'LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    ConfigManager.reset()
    yield
    ConfigManager.reset()


@pytest.fixture
def statements():
    """Five statements matching the two-factor loadings."""
    return [Statement(id=str(i), text=f"Statement text {i}") for i in range(1, 6)]


@pytest.fixture
def two_factors():
    """Two factors that agree on statement 1 and clash on statements 4 and 5."""
    return [
        Factor(id=1, eigenvalue=3.0, loadings=LOADINGS_A),
        Factor(id=2, eigenvalue=2.0, loadings=LOADINGS_B),
    ]


@pytest.fixture
def bipolar_factors():
    """Two internally correlated pairs that are negatively correlated with each other."""
    return [
        Factor(id=1, loadings=[1, 2, 3, 4, 5, 6]),
        Factor(id=2, loadings=[1, 2, 3, 4, 6, 5]),
        Factor(id=3, loadings=[6, 5, 4, 3, 2, 1]),
        Factor(id=4, loadings=[5, 6, 4, 3, 2, 1]),
    ]


@pytest.fixture
def zero_factor_set():
    """Two correlated factors plus one with all-zero loadings."""
    return [
        Factor(id=1, loadings=[1, 2, 3, 4]),
        Factor(id=2, loadings=[1, 2, 3, 5]),
        Factor(id=3, loadings=[0, 0, 0, 0]),
    ]


@pytest.fixture
def make_graph():
    """Build a RelationshipGraph from node ids and (a, b, r) triples."""
    def _make_graph(ids, edges=()):
        nodes = [
            FactorNode(id=i, label=f"Factor {i}", eigenvalue=1.0,
                       variance=100.0 / len(ids), significant_loadings=0)
            for i in ids
        ]
        rels = [
            RelationshipEdge(factor_a=a, factor_b=b, correlation=r, strength=abs(r),
                             kind=edge_kind(r), shared_count=0, conflicting_count=0)
            for a, b, r in edges
        ]
        return RelationshipGraph(nodes=nodes, edges=rels)
    return _make_graph
