"""Consensus rules for vote nodes.

A vote achieves consensus only when both conditions hold:

* quorum: the share of voters whose score clears ``min_score_per_vote`` is at
  least ``quorum_pct`` percent;
* global average: the mean of all scores is at least ``min_global_average``.

Otherwise the flow is routed to the vote's ``on_fail`` node.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .errors import DomainValidationError, GlobalAverageNotMetError, QuorumNotReachedError

MIN_VOTE_SCORE = 0
MAX_VOTE_SCORE = 20


class ConsensusStrategy(str, Enum):
    MAJORITY_VOTING = "majority_voting"
    WEIGHTED_VOTING = "weighted_voting"
    UNANIMOUS = "unanimous"


@dataclass(frozen=True, slots=True)
class Voter:
    provider: str
    role: str


@dataclass(frozen=True, slots=True)
class Ballot:
    """One judge's score for the output under vote."""

    voter: Voter
    score: float
    weight: float = 1.0

    def __post_init__(self) -> None:
        if self.score < MIN_VOTE_SCORE or self.score > MAX_VOTE_SCORE:
            raise DomainValidationError(
                f"Vote score must be between {MIN_VOTE_SCORE}-{MAX_VOTE_SCORE}, got: {self.score}"
            )
        if self.weight <= 0:
            raise DomainValidationError("Vote weight must be > 0")


@dataclass(frozen=True, slots=True)
class ConsensusOutcome:
    achieved: bool
    quorum_met: bool
    average_met: bool
    passing_votes: int
    total_votes: int
    required_votes: int
    quorum_pct_reached: float
    global_average: float
    required_average: float
    strategy: ConsensusStrategy = ConsensusStrategy.MAJORITY_VOTING
    passing_weight: float = 0.0
    required_weight: float = 0.0

    def raise_for_failure(self) -> None:
        if not self.quorum_met:
            if self.strategy is ConsensusStrategy.WEIGHTED_VOTING:
                raise QuorumNotReachedError(self.passing_weight, self.required_weight, "weight")
            raise QuorumNotReachedError(self.passing_votes, self.required_votes)
        if not self.average_met:
            raise GlobalAverageNotMetError(self.global_average, self.required_average)


@dataclass(frozen=True, slots=True)
class ConsensusRule:
    quorum_pct: int = 60
    min_score_per_vote: float = 0
    min_global_average: float = 0
    strategy: ConsensusStrategy = ConsensusStrategy.MAJORITY_VOTING

    def __post_init__(self) -> None:
        if self.quorum_pct < 1 or self.quorum_pct > 100:
            raise DomainValidationError("Quorum must be between 1-100")
        if self.min_score_per_vote < MIN_VOTE_SCORE or self.min_score_per_vote > MAX_VOTE_SCORE:
            raise DomainValidationError("Min score per vote must be between 0-20")

    def evaluate(self, ballots: Sequence[Ballot]) -> ConsensusOutcome:
        total = len(ballots)
        if total == 0:
            return ConsensusOutcome(
                achieved=False,
                quorum_met=False,
                average_met=False,
                passing_votes=0,
                total_votes=0,
                required_votes=0,
                quorum_pct_reached=0.0,
                global_average=0.0,
                required_average=self.min_global_average,
                strategy=self.strategy,
            )

        passing = [b for b in ballots if b.score >= self.min_score_per_vote]
        total_weight = math.fsum(b.weight for b in ballots)
        passing_weight = math.fsum(b.weight for b in passing)

        if self.strategy is ConsensusStrategy.WEIGHTED_VOTING:
            reached = passing_weight * 100 / total_weight
            quorum_met = passing_weight * 100 >= self.quorum_pct * total_weight
            average = math.fsum(b.score * b.weight for b in ballots) / total_weight
        else:
            reached = len(passing) * 100 / total
            if self.strategy is ConsensusStrategy.UNANIMOUS:
                quorum_met = len(passing) == total
            else:
                # Integer arithmetic avoids float drift at the exact boundary.
                quorum_met = len(passing) * 100 >= self.quorum_pct * total
            average = math.fsum(b.score for b in ballots) / total

        if self.strategy is ConsensusStrategy.UNANIMOUS:
            required_votes = total
        else:
            required_votes = math.ceil(self.quorum_pct * total / 100)

        average_met = average >= self.min_global_average
        return ConsensusOutcome(
            achieved=quorum_met and average_met,
            quorum_met=quorum_met,
            average_met=average_met,
            passing_votes=len(passing),
            total_votes=total,
            required_votes=required_votes,
            quorum_pct_reached=reached,
            global_average=average,
            required_average=self.min_global_average,
            strategy=self.strategy,
            passing_weight=passing_weight,
            required_weight=self.quorum_pct * total_weight / 100,
        )


def evaluate_scores(
    scores: Sequence[float],
    *,
    quorum_pct: int,
    min_score_per_vote: float = 0,
    min_global_average: float = 0,
) -> ConsensusOutcome:
    """Evaluate anonymous, equally-weighted scores under majority voting."""

    anonymous = Voter(provider="", role="")
    rule = ConsensusRule(
        quorum_pct=quorum_pct,
        min_score_per_vote=min_score_per_vote,
        min_global_average=min_global_average,
    )
    return rule.evaluate([Ballot(voter=anonymous, score=s) for s in scores])
