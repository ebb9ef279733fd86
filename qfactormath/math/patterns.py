"""
Interaction pattern classification.

Reads the overall topology of the factor network from the relationship
graph and its clusters. Patterns are not exclusive, except for the
'network' fallback which is reported only when nothing else matches.
"""

import logging
from typing import List, Optional

from qfactormath.models import Cluster, InteractionPattern, RelationshipGraph

logger = logging.getLogger(__name__)


def find_hub(graph: RelationshipGraph) -> Optional[InteractionPattern]:
    """
    Hub-spoke pattern, or None.

    A hub exists when the highest degree is more than twice the mean degree.
    Ties go to the lowest factor id.
    """
    degrees = graph.degrees()
    if not degrees:
        return None

    max_degree = max(degrees.values())
    avg_degree = sum(degrees.values()) / len(degrees)

    if max_degree <= avg_degree * 2:
        return None

    hub = min(node_id for node_id, degree in degrees.items() if degree == max_degree)
    return InteractionPattern(
        kind='hub-spoke',
        description=f"Factor {hub} acts as central hub connecting multiple perspectives",
        involved_factors=[hub],
        implications=['Central perspective may dominate discourse',
                      'High influence potential for hub factor']
    )


def find_bipolar(graph: RelationshipGraph, clusters: List[Cluster]) -> Optional[InteractionPattern]:
    """
    Bipolar pattern, or None.

    Requires exactly two multi-member clusters with at least one opposition
    edge running between them.
    """
    groups = [c for c in clusters if c.size > 1]
    if len(groups) != 2:
        return None

    first, second = set(groups[0].members), set(groups[1].members)
    bridged = any(
        e.kind == 'opposition' and (
            (e.factor_a in first and e.factor_b in second) or
            (e.factor_a in second and e.factor_b in first)
        )
        for e in graph.edges
    )
    if not bridged:
        return None

    return InteractionPattern(
        kind='bipolar',
        description='Two opposing groups of factors detected',
        involved_factors=list(groups[0].members) + list(groups[1].members),
        implications=['Strong polarization present',
                      'Consensus building may be challenging']
    )


def find_triangle(graph: RelationshipGraph, clusters: List[Cluster]) -> Optional[InteractionPattern]:
    """Triangular pattern for three factors or three singleton clusters, or None."""
    singletons = [c.members[0] for c in clusters if c.size == 1]

    if len(graph.nodes) == 3:
        involved = graph.node_ids
    elif len(singletons) == 3:
        involved = singletons
    else:
        return None

    return InteractionPattern(
        kind='triangular',
        description='Three distinct perspectives forming triangular relationship',
        involved_factors=list(involved),
        implications=['Multiple valid viewpoints present',
                      'Opportunity for synthesis']
    )


def find_isolated(graph: RelationshipGraph) -> Optional[InteractionPattern]:
    """Isolated pattern listing every factor without edges, or None."""
    isolated = [node_id for node_id, degree in graph.degrees().items() if degree == 0]
    if not isolated:
        return None

    return InteractionPattern(
        kind='isolated',
        description=f"{len(isolated)} factor(s) show no strong connections",
        involved_factors=isolated,
        implications=['Unique perspectives present',
                      'May require targeted engagement']
    )


def classify_patterns(graph: RelationshipGraph, clusters: List[Cluster]) -> List[InteractionPattern]:
    """
    Identify interaction patterns in a factor network.

    Args:
        graph: Relationship graph
        clusters: Clusters detected on the same graph

    Returns:
        Patterns in the order hub-spoke, bipolar, triangular, isolated;
        or a single 'network' pattern when none of those apply. Empty for
        an empty graph.
    """
    if not graph.nodes:
        return []

    candidates = [
        find_hub(graph),
        find_bipolar(graph, clusters),
        find_triangle(graph, clusters),
        find_isolated(graph),
    ]
    patterns = [p for p in candidates if p is not None]

    if not patterns:
        patterns.append(InteractionPattern(
            kind='network',
            description='Complex network of interconnected perspectives',
            involved_factors=graph.node_ids,
            implications=['Rich diversity of viewpoints',
                          'Multiple pathways for consensus']
        ))

    logger.info(f"Interaction patterns: {', '.join(p.kind for p in patterns)}")

    return patterns
