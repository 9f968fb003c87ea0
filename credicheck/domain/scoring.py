"""Score/risk deriver - maps a stable seed to a bureau score and its classifications"""

import hashlib
import random

from credicheck.domain.models import Bureau, RiskTier, ScoreAssessment, ScoreBand

MIN_SCORE = 300
MAX_SCORE = 900

BASE_SCORE_FLOOR = 650
BASE_SCORE_SPAN = 200


def derive_seed(pan: str, bureau: Bureau, revision: int) -> int:
    """
    Stable integer seed for a (consumer, bureau, revision) triple.

    The same PAN pulled from the same bureau at the same revision always
    reproduces the same report content; a refresh (revision + 1) or a
    different bureau yields a different one.
    """
    digest = hashlib.sha256(f"{pan}{bureau.value}{revision}".encode()).hexdigest()
    return int(digest, 16)


def derive_score(seed: int, jitter_points: int = 0) -> int:
    """
    Derive a numeric score from a seed.

    Base score lands in [650, 850) from the seeded stream. Jitter of up to
    +/- jitter_points is drawn from the same stream, so the result stays
    reproducible. Final score is clamped to [300, 900].
    """
    rng = random.Random(seed)
    base_score = BASE_SCORE_FLOOR + int(rng.random() * BASE_SCORE_SPAN)
    jitter = rng.randint(-jitter_points, jitter_points) if jitter_points > 0 else 0
    return min(MAX_SCORE, max(MIN_SCORE, base_score + jitter))


def score_band(score: int) -> ScoreBand:
    """
    Score bands:
    - <= 650:   POOR
    - 651-700:  FAIR
    - 701-750:  GOOD
    - > 750:    EXCELLENT
    """
    if score > 750:
        return ScoreBand.EXCELLENT
    elif score > 700:
        return ScoreBand.GOOD
    elif score > 650:
        return ScoreBand.FAIR
    else:
        return ScoreBand.POOR


def risk_tier(score: int) -> RiskTier:
    """
    Risk tiers:
    - <= 650:   HIGH
    - 651-720:  MEDIUM
    - > 720:    LOW
    """
    if score > 720:
        return RiskTier.LOW
    elif score > 650:
        return RiskTier.MEDIUM
    else:
        return RiskTier.HIGH


def assess(seed: int, jitter_points: int = 0) -> ScoreAssessment:
    """Main entry point: score plus its band and risk tier"""
    score = derive_score(seed, jitter_points)
    return ScoreAssessment(score=score, band=score_band(score), tier=risk_tier(score))
