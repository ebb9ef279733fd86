"""
Factor interaction analysis.

Chains the relationship graph, cluster detection, pattern classification
and network metrics into one stateless run over a factor set.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Union

from qfactormath.components.config import Config, ConfigManager
from qfactormath.errors import FactorNotFound
from qfactormath.models import (
    Cluster, EdgeKind, Factor, FactorNode, InteractionPattern,
    NetworkMetricsSnapshot, Record, RelationshipGraph
)
from qfactormath.math.clusters import NarrativeLookup, detect_clusters
from qfactormath.math.corr import build_relationship_graph, check_filter_threshold
from qfactormath.math.loadings import load_factors, validate_factors
from qfactormath.math.network import network_health, network_metrics
from qfactormath.math.patterns import classify_patterns

logger = logging.getLogger(__name__)


class InteractionAnalysis(Record):
    """Result of one interaction run."""

    filter_threshold: float
    graph: RelationshipGraph
    clusters: List[Cluster]
    patterns: List[InteractionPattern]
    metrics: NetworkMetricsSnapshot
    health: str

    def cluster_of(self, factor_id: int) -> Cluster:
        for cluster in self.clusters:
            if factor_id in cluster.members:
                return cluster
        raise FactorNotFound(factor_id)

    def get_summary(self) -> Dict[str, Any]:
        return {
            'factor_count': len(self.graph.nodes),
            'edge_count': len(self.graph.edges),
            'cluster_count': len(self.clusters),
            'patterns': [p.kind for p in self.patterns],
            'health': self.health,
        }


class Connection(Record):
    factor_id: int
    kind: EdgeKind
    strength: float


class FactorDetails(Record):
    """One factor's node attributes and its connections."""

    node: FactorNode
    cluster_id: int
    connections: List[Connection]

    @property
    def connection_count(self) -> int:
        return len(self.connections)


def analyze_interactions(factors: List[Union[Factor, Dict[str, Any]]],
                         narratives: NarrativeLookup = None,
                         filter_threshold: Optional[float] = None,
                         config: Optional[Config] = None) -> InteractionAnalysis:
    """
    Run the full interaction analysis.

    Args:
        factors: Factor records or raw dictionaries
        narratives: Optional mapping or callable from factor id to theme label
        filter_threshold: Minimum edge strength; defaults to the configured value
        config: Configuration; defaults to the shared instance

    Returns:
        InteractionAnalysis
    """
    config = (config or ConfigManager.get_config()).validate()
    threshold = check_filter_threshold(
        config.filter_threshold if filter_threshold is None else filter_threshold
    )

    factors = load_factors(factors)
    validate_factors(factors)

    start_time = time.time()
    logger.info(f"Analyzing interactions for {len(factors)} factors")

    graph = build_relationship_graph(factors, threshold, config.significant_loading)
    clusters = detect_clusters(graph, narratives)
    patterns = classify_patterns(graph, clusters)
    metrics = network_metrics(graph, clusters)

    logger.info(f"Interaction analysis completed in {time.time() - start_time:.2f}s")

    return InteractionAnalysis(
        filter_threshold=threshold,
        graph=graph,
        clusters=clusters,
        patterns=patterns,
        metrics=metrics,
        health=network_health(metrics)
    )


def factor_details(analysis: InteractionAnalysis, factor_id: int) -> FactorDetails:
    """
    Node attributes and connections for one factor.

    Args:
        analysis: Interaction analysis result
        factor_id: Factor to describe

    Returns:
        FactorDetails
    """
    node = next((n for n in analysis.graph.nodes if n.id == factor_id), None)
    if node is None:
        raise FactorNotFound(factor_id)

    connections = [
        Connection(factor_id=edge.other(factor_id), kind=edge.kind, strength=edge.strength)
        for edge in analysis.graph.edges_for(factor_id)
    ]

    return FactorDetails(
        node=node,
        cluster_id=analysis.cluster_of(factor_id).id,
        connections=connections
    )
