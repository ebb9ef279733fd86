"""
Cluster detection for factor relationship graphs.

Factors are grouped into connected components over strong positive
correlation edges. Factors that join no component become singleton
clusters, so the result always partitions the full factor set.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Union

import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import breadth_first_order

from qfactormath.errors import ValidationError
from qfactormath.models import Cluster, RelationshipEdge, RelationshipGraph
from qfactormath.math.stats import STRONG_CORRELATION
from qfactormath.utils.general import as_lookup

logger = logging.getLogger(__name__)

NarrativeLookup = Union[None, Mapping[Any, str], Callable[[int], Optional[str]]]


def is_strong_edge(edge: RelationshipEdge) -> bool:
    """True for correlation edges above the fixed strong threshold."""
    return edge.kind == 'correlation' and edge.strength > STRONG_CORRELATION


def strong_adjacency(graph: RelationshipGraph) -> csr_matrix:
    """
    Sparse adjacency matrix of strong correlation edges.

    Args:
        graph: Relationship graph

    Returns:
        Symmetric k x k CSR matrix indexed by node position
    """
    index = {node_id: i for i, node_id in enumerate(graph.node_ids)}
    n = len(index)

    rows, cols = [], []
    for edge in graph.edges:
        if not is_strong_edge(edge):
            continue
        a, b = index[edge.factor_a], index[edge.factor_b]
        rows.extend([a, b])
        cols.extend([b, a])

    data = np.ones(len(rows), dtype=np.int8)
    return csr_matrix(
        (data, (np.array(rows, dtype=np.int32), np.array(cols, dtype=np.int32))),
        shape=(n, n)
    )


def find_components(graph: RelationshipGraph) -> List[List[int]]:
    """
    Connected components over strong correlation edges.

    Nodes are visited in input order; each component lists its members in
    breadth-first order from its first node.

    Args:
        graph: Relationship graph

    Returns:
        List of components as lists of factor ids, singletons included
    """
    node_ids = graph.node_ids
    if not node_ids:
        return []

    adjacency = strong_adjacency(graph)
    visited = set()
    components = []

    for start in range(len(node_ids)):
        if start in visited:
            continue

        order = breadth_first_order(adjacency, start, directed=False, return_predecessors=False)
        members = [int(i) for i in order]
        visited.update(members)
        components.append([node_ids[i] for i in members])

    return components


def cluster_coherence(members: List[int], edges: List[RelationshipEdge]) -> float:
    """
    Fraction of member pairs joined by an edge of any kind.

    Args:
        members: Factor ids in the cluster
        edges: Full edge set

    Returns:
        Coherence in [0, 1]; 1 for a singleton
    """
    if len(members) <= 1:
        return 1.0

    member_set = set(members)
    internal = sum(1 for e in edges if e.factor_a in member_set and e.factor_b in member_set)
    possible = len(members) * (len(members) - 1) / 2

    return internal / possible if possible > 0 else 0.0


def cluster_theme(members: List[int], narratives: NarrativeLookup = None) -> str:
    """
    Theme label for a cluster.

    The first member with a narrative theme supplies it; otherwise the
    member ids are listed. Numeric labels, as YAML reads them, are turned
    into strings.

    Args:
        members: Factor ids in the cluster
        narratives: Mapping or callable from factor id to theme label

    Returns:
        Theme label
    """
    lookup = as_lookup(narratives)
    for factor_id in members:
        theme = lookup(factor_id)
        if theme is None or theme == '':
            continue
        if not isinstance(theme, (str, int, float)):
            raise ValidationError(f"Narrative theme for factor {factor_id} must be text, got {theme!r}")
        return str(theme)
    return f"Factors {', '.join(str(m) for m in members)}"


def cluster_characteristics(size: int, total_factors: int) -> List[str]:
    """
    Describe a cluster by its size relative to the factor set.

    Args:
        size: Number of members
        total_factors: Number of factors in the analysis

    Returns:
        List of characteristic labels
    """
    if size == 1:
        return ['Independent perspective']
    if size == 2:
        return ['Bilateral alignment']
    if size > total_factors / 2:
        return ['Majority viewpoint']
    return ['Minority coalition']


def detect_clusters(graph: RelationshipGraph, narratives: NarrativeLookup = None) -> List[Cluster]:
    """
    Partition factors into clusters.

    Multi-member components come first, in discovery order, followed by
    every remaining factor as its own cluster.

    Args:
        graph: Relationship graph
        narratives: Optional mapping or callable from factor id to theme label

    Returns:
        List of clusters covering every factor exactly once
    """
    total = len(graph.nodes)
    components = find_components(graph)

    clusters = []
    for members in components:
        if len(members) < 2:
            continue
        clusters.append(Cluster(
            id=len(clusters) + 1,
            name=f"Cluster {len(clusters) + 1}",
            members=tuple(members),
            coherence=cluster_coherence(members, graph.edges),
            theme=cluster_theme(members, narratives),
            characteristics=cluster_characteristics(len(members), total)
        ))

    clustered = {m for c in clusters for m in c.members}
    for node_id in graph.node_ids:
        if node_id in clustered:
            continue
        clusters.append(Cluster(
            id=len(clusters) + 1,
            name=f"Isolated Factor {node_id}",
            members=(node_id,),
            coherence=1.0,
            theme=cluster_theme([node_id], narratives),
            characteristics=cluster_characteristics(1, total)
        ))

    logger.info(f"Detected {len(clusters)} clusters "
                f"({sum(1 for c in clusters if c.size > 1)} multi-factor)")

    return clusters
