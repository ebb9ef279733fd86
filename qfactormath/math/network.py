"""
Network-level metrics for the factor relationship graph.
"""

import logging
from typing import List

from qfactormath.models import Cluster, NetworkMetricsSnapshot, RelationshipGraph
from qfactormath.utils.general import mean

logger = logging.getLogger(__name__)


def network_density(graph: RelationshipGraph) -> float:
    """Materialized edges as a percentage of all possible factor pairs."""
    n = len(graph.nodes)
    if n < 2:
        return 0.0
    possible = n * (n - 1) / 2
    return len(graph.edges) / possible * 100


def network_centralization(graph: RelationshipGraph) -> float:
    """
    Degree centralization, as a percentage.

    Sum of (max degree - degree) over all nodes, normalized by the value
    a star graph would reach, (n-1)(n-2).
    """
    n = len(graph.nodes)
    if n <= 2:
        return 0.0
    degrees = list(graph.degrees().values())
    max_degree = max(degrees)
    return sum(max_degree - d for d in degrees) / ((n - 1) * (n - 2)) * 100


def network_polarization(graph: RelationshipGraph) -> float:
    """Share of edges that are oppositions, as a percentage."""
    if not graph.edges:
        return 0.0
    opposing = sum(1 for e in graph.edges if e.kind == 'opposition')
    return opposing / len(graph.edges) * 100


def network_metrics(graph: RelationshipGraph, clusters: List[Cluster]) -> NetworkMetricsSnapshot:
    """
    Compute network metrics.

    Args:
        graph: Relationship graph
        clusters: Clusters detected on the same graph

    Returns:
        Snapshot with density, centralization, clustering coefficient,
        modularity and polarization, each in [0, 100]
    """
    clustering = mean([c.coherence for c in clusters]) * 100
    modularity = (1 - 1 / len(clusters)) * 100 if len(clusters) > 1 else 0.0

    metrics = NetworkMetricsSnapshot(
        density=network_density(graph),
        centralization=network_centralization(graph),
        clustering_coefficient=clustering,
        modularity=modularity,
        polarization=network_polarization(graph)
    )

    logger.debug(f"Network metrics: {metrics.model_dump()}")

    return metrics


def network_health(metrics: NetworkMetricsSnapshot) -> str:
    """
    One-line reading of the network for analysts.

    Args:
        metrics: Network metrics

    Returns:
        Health summary
    """
    if metrics.density > 50:
        return 'High connectivity suggests strong consensus potential'
    if metrics.polarization > 30:
        return 'Significant polarization detected - mediation may be needed'
    return 'Moderate connectivity with diverse perspectives'
