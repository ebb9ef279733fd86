"""
Record types for qfactormath.

Inputs (Factor, Statement) are validated at the ingestion boundary; every
output record is derived from them and frozen once built.
"""

import math
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


EdgeKind = Literal['correlation', 'opposition', 'neutral']
PatternKind = Literal['hub-spoke', 'bipolar', 'triangular', 'isolated', 'network']
Significance = Literal['high', 'medium', 'low']
ThresholdLevel = Literal['strict', 'moderate', 'inclusive']


class Record(BaseModel):
    """Base for all qfactormath records."""

    model_config = ConfigDict(frozen=True)


# Input records

class Statement(Record):
    """A Q-set statement."""

    id: str
    text: str


class Factor(Record):
    """
    A rotated factor from a completed Q analysis.

    Loadings are ordered by statement position and are read as factor
    z-scores by the distinguishing-statement extractor.
    """

    id: int
    eigenvalue: float = 1.0
    variance_explained: Optional[float] = None
    loadings: Tuple[float, ...] = ()

    @field_validator('loadings')
    @classmethod
    def loadings_are_finite(cls, v: Tuple[float, ...]) -> Tuple[float, ...]:
        for i, value in enumerate(v):
            if not math.isfinite(value):
                raise ValueError(f"loading at position {i} is not finite: {value}")
        return v


# Relationship graph

class FactorNode(Record):
    """Graph node describing one factor."""

    id: int
    label: str
    eigenvalue: float
    variance: float
    significant_loadings: int


class RelationshipEdge(Record):
    """Undirected edge between two factors, factor_a < factor_b in input order."""

    factor_a: int
    factor_b: int
    correlation: float
    strength: float = Field(ge=0.0, le=1.0)
    kind: EdgeKind
    shared_count: int
    conflicting_count: int

    def touches(self, factor_id: int) -> bool:
        return factor_id == self.factor_a or factor_id == self.factor_b

    def other(self, factor_id: int) -> int:
        return self.factor_b if factor_id == self.factor_a else self.factor_a


class RelationshipGraph(Record):
    """Factor nodes plus the edges that passed the filter threshold."""

    nodes: List[FactorNode] = Field(default_factory=list)
    edges: List[RelationshipEdge] = Field(default_factory=list)

    @property
    def node_ids(self) -> List[int]:
        return [node.id for node in self.nodes]

    def edges_for(self, factor_id: int) -> List[RelationshipEdge]:
        return [edge for edge in self.edges if edge.touches(factor_id)]

    def degree(self, factor_id: int) -> int:
        return len(self.edges_for(factor_id))

    def degrees(self) -> Dict[int, int]:
        """Incident-edge count per node, any edge kind."""
        return {node.id: self.degree(node.id) for node in self.nodes}

    def neighbors(self, factor_id: int) -> List[int]:
        return [edge.other(factor_id) for edge in self.edges_for(factor_id)]


class Cluster(Record):
    """A group of factors joined by strong positive correlation."""

    id: int
    name: str
    members: Tuple[int, ...]
    coherence: float = Field(ge=0.0, le=1.0)
    theme: str
    characteristics: List[str]

    @property
    def size(self) -> int:
        return len(self.members)


class InteractionPattern(Record):
    kind: PatternKind
    description: str
    involved_factors: List[int]
    implications: List[str]


class NetworkMetricsSnapshot(Record):
    """Whole-network measures, each on a 0-100 scale."""

    density: float = 0.0
    centralization: float = 0.0
    clustering_coefficient: float = 0.0
    modularity: float = 0.0
    polarization: float = 0.0


# Distinguishing statements

class DistinguishingStatement(Record):
    statement_id: str
    statement_number: int
    text: str
    factor_id: int
    z_score: float
    significance: Significance
    unique_to_factor: bool
    opposing_factors: List[int]
    sharing_factors: List[int] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=100.0)
    explanation: str


class Opposition(Record):
    opposing_factor: int
    conflicting_beliefs: List[str]
    intensity: float = Field(ge=0.0, le=100.0)


class FactorDistinction(Record):
    """Everything that sets one factor apart from the others."""

    factor_id: int
    distinguishing: List[DistinguishingStatement] = Field(default_factory=list)
    core_beliefs: List[DistinguishingStatement] = Field(default_factory=list)
    oppositions: List[Opposition] = Field(default_factory=list)
    uniqueness_score: float = 0.0
    clarity_score: float = 0.0

    @property
    def unique_count(self) -> int:
        return sum(1 for s in self.distinguishing if s.unique_to_factor)


# Contrast

class Agreement(Record):
    statement_id: str
    text: str
    strength: float


class Disagreement(Record):
    statement_id: str
    text: str
    z_a: float
    z_b: float
    gap: float


class ContrastResult(Record):
    factor_a: int
    factor_b: int
    agreements: List[Agreement] = Field(default_factory=list)
    disagreements: List[Disagreement] = Field(default_factory=list)
    overall_similarity: float = 0.0
    key_difference: str
