"""
Tests for the interaction pattern module.
"""

import pytest
import sys
import os

# Add the parent directory to the path to import the module
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from qfactormath.math.clusters import detect_clusters
from qfactormath.math.corr import build_relationship_graph
from qfactormath.math.patterns import (
    find_hub, find_bipolar, find_triangle, find_isolated, classify_patterns
)


def kinds(patterns):
    return [p.kind for p in patterns]


class TestHubSpoke:
    """Tests for hub detection."""
    
    def test_star(self, make_graph):
        """Test a star graph centered on factor 1."""
        graph = make_graph([1, 2, 3, 4, 5], [(1, 2, 0.4), (1, 3, 0.4), (1, 4, 0.4), (1, 5, -0.4)])
        patterns = classify_patterns(graph, detect_clusters(graph))
        
        assert kinds(patterns) == ['hub-spoke']
        assert patterns[0].involved_factors == [1]
        assert patterns[0].description == 'Factor 1 acts as central hub connecting multiple perspectives'
    
    def test_tie_goes_to_lowest_id(self, make_graph):
        """Test that equal-degree hubs resolve to the lowest id."""
        graph = make_graph(
            list(range(1, 11)),
            [(4, 5, 0.4), (4, 6, 0.4), (4, 7, 0.4), (2, 8, 0.4), (2, 9, 0.4), (2, 10, 0.4)]
        )
        
        assert find_hub(graph).involved_factors == [2]
    
    def test_regular_graph_has_no_hub(self, make_graph):
        """Test that equal degrees never form a hub."""
        graph = make_graph([1, 2, 3], [(1, 2, 0.4), (2, 3, 0.4), (1, 3, 0.4)])
        assert find_hub(graph) is None
    
    def test_no_edges(self, make_graph):
        """Test that a graph without edges has no hub."""
        assert find_hub(make_graph([1, 2])) is None


class TestBipolar:
    """Tests for bipolar detection."""
    
    def test_two_opposing_clusters(self, bipolar_factors):
        """Test two correlated pairs opposing each other."""
        graph = build_relationship_graph(bipolar_factors)
        clusters = detect_clusters(graph)
        pattern = find_bipolar(graph, clusters)
        
        assert pattern is not None
        assert sorted(pattern.involved_factors) == [1, 2, 3, 4]
    
    def test_requires_opposition_between_clusters(self, make_graph):
        """Test that neutral cross links are not enough."""
        graph = make_graph([1, 2, 3, 4], [(1, 2, 0.9), (3, 4, 0.9), (2, 3, 0.35)])
        assert find_bipolar(graph, detect_clusters(graph)) is None
    
    def test_singletons_do_not_count(self, make_graph):
        """Test that extra singleton clusters do not block the pattern."""
        graph = make_graph([1, 2, 3, 4, 5], [(1, 2, 0.9), (3, 4, 0.9), (1, 4, -0.7)])
        pattern = find_bipolar(graph, detect_clusters(graph))
        
        assert pattern.involved_factors == [1, 2, 3, 4]
    
    def test_three_groups(self, make_graph):
        """Test that three multi-member clusters are not bipolar."""
        graph = make_graph(
            [1, 2, 3, 4, 5, 6],
            [(1, 2, 0.9), (3, 4, 0.9), (5, 6, 0.9), (1, 3, -0.8)]
        )
        assert find_bipolar(graph, detect_clusters(graph)) is None


class TestTriangular:
    """Tests for triangle detection."""
    
    def test_three_factors(self, make_graph):
        """Test that any three-factor set is triangular."""
        graph = make_graph([1, 2, 3], [(1, 2, 0.9)])
        pattern = find_triangle(graph, detect_clusters(graph))
        
        assert pattern.involved_factors == [1, 2, 3]
    
    def test_three_singletons(self, make_graph):
        """Test three singleton clusters among more factors."""
        graph = make_graph([1, 2, 3, 4, 5], [(1, 2, 0.9), (3, 4, 0.4)])
        pattern = find_triangle(graph, detect_clusters(graph))
        
        assert pattern.involved_factors == [3, 4, 5]
    
    def test_four_singletons(self, make_graph):
        """Test that four singletons are not a triangle."""
        graph = make_graph([1, 2, 3, 4])
        assert find_triangle(graph, detect_clusters(graph)) is None


class TestIsolated:
    """Tests for isolated factor detection."""
    
    def test_isolated(self, make_graph):
        """Test listing every factor without edges."""
        graph = make_graph([1, 2, 3, 4], [(1, 2, 0.9)])
        pattern = find_isolated(graph)
        
        assert pattern.involved_factors == [3, 4]
        assert pattern.description == '2 factor(s) show no strong connections'
    
    def test_zero_factor(self, zero_factor_set):
        """Test that an all-zero factor is isolated."""
        graph = build_relationship_graph(zero_factor_set)
        patterns = classify_patterns(graph, detect_clusters(graph))
        isolated = [p for p in patterns if p.kind == 'isolated']
        
        assert len(isolated) == 1
        assert isolated[0].involved_factors == [3]


class TestClassifyPatterns:
    """Tests for the combined classification."""
    
    def test_network_fallback(self, make_graph):
        """Test the network pattern when nothing else applies."""
        ids = [1, 2, 3, 4]
        edges = [(a, b, 0.4) for i, a in enumerate(ids) for b in ids[i + 1:]]
        graph = make_graph(ids, edges)
        patterns = classify_patterns(graph, detect_clusters(graph))
        
        assert kinds(patterns) == ['network']
        assert patterns[0].involved_factors == [1, 2, 3, 4]
    
    def test_patterns_coexist(self, make_graph):
        """Test that several patterns can be reported together."""
        graph = make_graph([1, 2, 3], [(1, 2, 0.9)])
        patterns = classify_patterns(graph, detect_clusters(graph))
        
        assert kinds(patterns) == ['triangular', 'isolated']
        assert 'network' not in kinds(patterns)
    
    def test_bipolar_scenario(self, bipolar_factors):
        """Test the bipolar factor set end to end."""
        graph = build_relationship_graph(bipolar_factors)
        patterns = classify_patterns(graph, detect_clusters(graph))
        
        assert kinds(patterns) == ['bipolar']
    
    def test_empty(self, make_graph):
        """Test that no factors give no patterns."""
        assert classify_patterns(make_graph([]), []) == []
