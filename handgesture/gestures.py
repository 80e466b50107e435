"""
Gesture estimation: score hand geometry against the registered templates.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .geometry import angle_between, extract_geometry
from .templates import DEFAULT_TEMPLATES, CurlConstraint, DirectionConstraint, GestureTemplate
from .types import FingerGeometry, HandEstimate, HandGeometry, HandObservation, MatchResult

logger = logging.getLogger(__name__)

# Score is a mean of per-constraint sub-scores in [0, 1], so thresholds are
# fractions of the maximum attainable score (1.0).
DEFAULT_THRESHOLD = 0.9


def curl_score(constraint: CurlConstraint, observed: float) -> float:
    """Best weighted closeness of an observed curl to any acceptable range."""
    best = 0.0
    for option in constraint.options:
        if observed < option.low:
            distance = option.low - observed
        elif observed > option.high:
            distance = observed - option.high
        else:
            distance = 0.0
        closeness = 1.0 - min(1.0, distance / constraint.falloff)
        best = max(best, option.weight * closeness)
    return best


def direction_score(constraint: DirectionConstraint, observed) -> float:
    """Weighted angular closeness; a zero observed direction scores 0."""
    angle = angle_between(observed, constraint.target)
    tolerance = constraint.tolerance_deg
    if angle <= tolerance:
        closeness = 1.0
    else:
        closeness = max(0.0, 1.0 - (angle - tolerance) / tolerance)
    return constraint.weight * closeness


def score_template(template: GestureTemplate, geometry: HandGeometry) -> float:
    """
    Aggregate score of one template in [0, 1].

    Each declared curl or direction constraint contributes one sub-score;
    the result is their mean.
    """
    total = 0.0
    count = 0
    for finger, criteria in template.criteria:
        observed = geometry.get(finger)
        if observed is None:
            observed = FingerGeometry(curl=0.0, direction=(0.0, 0.0, 0.0))
        if criteria.curl is not None:
            total += curl_score(criteria.curl, observed.curl)
            count += 1
        if criteria.direction is not None:
            total += direction_score(criteria.direction, observed.direction)
            count += 1
    if count == 0:
        return 0.0
    return total / count


def best_match(matches: Sequence[MatchResult]) -> Optional[MatchResult]:
    """Highest-scoring match; on a tie the earlier (first-registered) wins."""
    best: Optional[MatchResult] = None
    for match in matches:
        if best is None or match.score > best.score:
            best = match
    return best


class GestureEstimator:
    """
    Matches hand geometry against a fixed, ordered set of gesture templates.

    The template set is captured as a tuple at construction and never
    changes afterwards.
    """

    def __init__(self, templates: Iterable[GestureTemplate] = DEFAULT_TEMPLATES):
        """Initialize the estimator with its template registry."""
        self.templates: Tuple[GestureTemplate, ...] = tuple(templates)
        names = [t.name for t in self.templates]
        logger.debug("Gesture estimator ready with %d templates: %s", len(names), names)

    def estimate(self, geometry: HandGeometry, threshold: float = DEFAULT_THRESHOLD) -> List[MatchResult]:
        """
        Score every template and keep those at or above the threshold.

        Args:
            geometry: Per-finger curl and direction for one hand
            threshold: Minimum score as a fraction of the maximum (1.0)

        Returns:
            Qualifying matches in template registration order
        """
        matches = []
        for template in self.templates:
            score = score_template(template, geometry)
            if score >= threshold:
                matches.append(MatchResult(name=template.name, score=score))
        return matches

    def estimate_hand(self, hand: HandObservation, threshold: float = DEFAULT_THRESHOLD) -> HandEstimate:
        """Extract geometry for one observation, estimate, and pick the best match."""
        geometry = extract_geometry(hand.joints)
        matches = self.estimate(geometry, threshold)
        return HandEstimate(
            handedness=hand.handedness,
            geometry=geometry,
            matches=matches,
            best=best_match(matches),
        )
