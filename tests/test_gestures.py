"""
Test cases for gesture template scoring with synthetic hands.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handgesture.geometry import extract_geometry
from handgesture.gestures import (
    DEFAULT_THRESHOLD,
    GestureEstimator,
    best_match,
    curl_score,
    direction_score,
    score_template,
)
from handgesture.synthetic import CLICK, FIST, OPEN_HAND, POINTER, make_hand
from handgesture.templates import (
    DEFAULT_TEMPLATES,
    Curl,
    CurlConstraint,
    CurlOption,
    DirectionConstraint,
    FingerCriteria,
    curl,
    gesture,
)
from handgesture.types import Finger, FingerGeometry, Handedness, MatchResult

UP = (0.0, -1.0, 0.0)


def geometry_of(curls, direction=UP):
    """Hand geometry with the given curls and every finger pointing the same way."""
    return {
        finger: FingerGeometry(curl=curls.get(finger, 0.0), direction=direction)
        for finger in Finger
    }


class TestSubScores(unittest.TestCase):
    """Test per-constraint scoring."""

    def test_curl_inside_range_scores_weight(self):
        constraint = CurlConstraint((CurlOption.named(Curl.HALF_CURL, 0.9),))
        self.assertAlmostEqual(curl_score(constraint, 0.5), 0.9)

    def test_curl_score_falls_off_linearly(self):
        constraint = curl(Curl.NO_CURL)  # 0.0..0.15, falloff 0.25
        self.assertAlmostEqual(curl_score(constraint, 0.2), 0.8)
        self.assertAlmostEqual(curl_score(constraint, 0.275), 0.5)
        self.assertEqual(curl_score(constraint, 0.5), 0.0)

    def test_curl_score_is_monotonic(self):
        constraint = curl(Curl.FULL_CURL)
        scores = [curl_score(constraint, c / 20.0) for c in range(21)]
        self.assertEqual(scores, sorted(scores))
        self.assertTrue(all(0.0 <= s <= 1.0 for s in scores))

    def test_best_curl_option_wins(self):
        constraint = CurlConstraint((
            CurlOption.named(Curl.FULL_CURL, 1.0),
            CurlOption.named(Curl.HALF_CURL, 0.9),
        ))
        self.assertAlmostEqual(curl_score(constraint, 0.5), 0.9)
        self.assertAlmostEqual(curl_score(constraint, 0.95), 1.0)

    def test_direction_score(self):
        constraint = DirectionConstraint(UP, tolerance_deg=45.0)
        self.assertAlmostEqual(direction_score(constraint, UP), 1.0)
        self.assertAlmostEqual(direction_score(constraint, (1.0, -1.0, 0.0)), 1.0)
        # 90 degrees off with a 45 degree tolerance
        self.assertAlmostEqual(direction_score(constraint, (1.0, 0.0, 0.0)), 0.0)
        self.assertAlmostEqual(direction_score(constraint, (0.0, 1.0, 0.0)), 0.0)

    def test_direction_score_zero_vector(self):
        constraint = DirectionConstraint(UP)
        self.assertEqual(direction_score(constraint, (0.0, 0.0, 0.0)), 0.0)


class TestGestureEstimator(unittest.TestCase):
    """Test template matching."""

    def setUp(self):
        """Set up estimator with the built-in templates."""
        self.estimator = GestureEstimator(DEFAULT_TEMPLATES)

    def _best(self, curls, **kwargs):
        hand = make_hand(curls, **kwargs)
        return self.estimator.estimate_hand(hand, DEFAULT_THRESHOLD).best

    def test_exact_match_scores_maximum(self):
        """A hand meeting every constraint scores the maximum, 1.0."""
        matches = self.estimator.estimate(extract_geometry(make_hand(POINTER).joints))
        by_name = {m.name: m.score for m in matches}
        self.assertIn("index_pointer", by_name)
        self.assertAlmostEqual(by_name["index_pointer"], 1.0)

    def test_index_pointer_scenario(self):
        """Index straight and up, middle/ring/pinky curled -> index_pointer."""
        best = self._best(POINTER)
        self.assertIsNotNone(best)
        self.assertEqual(best.name, "index_pointer")

    def test_pointer_direction_is_free(self):
        """The built-in pointer constrains curl only, so a sideways index still counts."""
        curled = {Finger.MIDDLE: 1.0, Finger.RING: 1.0, Finger.PINKY: 1.0}
        for direction in (UP, (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)):
            best = best_match(self.estimator.estimate(geometry_of(curled, direction)))
            self.assertEqual(best.name, "index_pointer")

    def test_index_click_scenario(self):
        """Index half curled -> index_click, and index_pointer falls below threshold."""
        geometry = extract_geometry(make_hand(CLICK).joints)
        matches = self.estimator.estimate(geometry)
        self.assertEqual([m.name for m in matches], ["index_click"])
        self.assertEqual(best_match(matches).name, "index_click")

    def test_fist_matches_nothing(self):
        """All fingers fully curled fits no registered template."""
        geometry = extract_geometry(make_hand(FIST).joints)
        self.assertEqual(self.estimator.estimate(geometry), [])
        self.assertIsNone(self._best(FIST))

    def test_open_hand_matches_nothing(self):
        self.assertIsNone(self._best(OPEN_HAND))

    def test_left_hand_recognised(self):
        self.assertEqual(self._best(CLICK, handedness=Handedness.LEFT).name, "index_click")

    def test_scale_invariance(self):
        """Scores do not depend on the size or position of the hand."""
        for curls in (POINTER, CLICK, FIST, {Finger.INDEX: 0.3, Finger.MIDDLE: 0.8}):
            base = extract_geometry(make_hand(curls).joints)
            scaled = extract_geometry(make_hand(curls, scale=40.0, origin=(100, 50, -3)).joints)
            for template in DEFAULT_TEMPLATES:
                self.assertAlmostEqual(
                    score_template(template, base), score_template(template, scaled), places=7
                )

    def test_scores_are_bounded(self):
        for curls in (POINTER, CLICK, FIST, OPEN_HAND):
            geometry = extract_geometry(make_hand(curls).joints)
            for template in DEFAULT_TEMPLATES:
                score = score_template(template, geometry)
                self.assertGreaterEqual(score, 0.0)
                self.assertLessEqual(score, 1.0 + 1e-9)

    def test_threshold_zero_returns_every_template(self):
        geometry = extract_geometry(make_hand(FIST).joints)
        matches = self.estimator.estimate(geometry, threshold=0.0)
        self.assertEqual([m.name for m in matches], ["index_pointer", "index_click"])

    def test_missing_fingers_do_not_raise(self):
        """Geometry without entries scores as straight, zero-direction fingers."""
        self.assertEqual(self.estimator.estimate({}), [])

    def test_estimate_does_not_touch_registry(self):
        before = self.estimator.templates
        self.estimator.estimate(extract_geometry(make_hand(POINTER).joints))
        self.assertIs(self.estimator.templates, before)
        self.assertIsInstance(self.estimator.templates, tuple)


class TestBestMatch(unittest.TestCase):
    """Test best-match selection and tie breaking."""

    def test_empty(self):
        self.assertIsNone(best_match([]))

    def test_highest_score_wins(self):
        matches = [MatchResult("a", 0.91), MatchResult("b", 0.97), MatchResult("c", 0.93)]
        self.assertEqual(best_match(matches).name, "b")

    def test_tie_goes_to_first_registered(self):
        twin = FingerCriteria(curl=curl(Curl.FULL_CURL))
        first = gesture("first", middle=twin, ring=twin)
        second = gesture("second", middle=twin, ring=twin)
        geometry = geometry_of({Finger.MIDDLE: 1.0, Finger.RING: 1.0})

        matches = GestureEstimator([first, second]).estimate(geometry)
        self.assertEqual([m.score for m in matches], [1.0, 1.0])
        self.assertEqual(best_match(matches).name, "first")

        matches = GestureEstimator([second, first]).estimate(geometry)
        self.assertEqual(best_match(matches).name, "second")

    def test_partial_satisfaction_prefers_higher_score(self):
        """Hand partly satisfying two templates picks the closer one."""
        straightish = gesture(
            "straightish",
            index=FingerCriteria(curl=curl(Curl.NO_CURL)),
            middle=FingerCriteria(curl=curl(Curl.FULL_CURL)),
        )
        halfway = gesture(
            "halfway",
            index=FingerCriteria(curl=curl(Curl.HALF_CURL)),
            middle=FingerCriteria(curl=curl(Curl.FULL_CURL)),
        )
        geometry = geometry_of({Finger.INDEX: 0.2, Finger.MIDDLE: 1.0})
        matches = GestureEstimator([halfway, straightish]).estimate(geometry, threshold=0.5)

        scores = {m.name: m.score for m in matches}
        self.assertAlmostEqual(scores["straightish"], 0.9)
        self.assertAlmostEqual(scores["halfway"], 0.7)
        self.assertEqual(best_match(matches).name, "straightish")


if __name__ == '__main__':
    unittest.main()
