"""
tests/unit/test_optimization_convergence.py - Tests for stall detection.
"""

from nameforge.optimization.convergence import ConvergenceTracker


class TestConvergenceTracker:
    """Tests for ConvergenceTracker."""

    def test_converges_after_window_of_stalls(self):
        tracker = ConvergenceTracker(threshold=0.001, window=3, initial_best=0.5)

        assert not tracker.update(0.5)
        assert not tracker.update(0.5)
        assert tracker.update(0.5)
        assert tracker.converged

    def test_improvement_resets_count(self):
        tracker = ConvergenceTracker(threshold=0.001, window=3, initial_best=0.5)

        tracker.update(0.5)
        tracker.update(0.5)
        assert not tracker.update(0.6)

        assert tracker.stall_count == 0
        assert tracker.last_recorded_best == 0.6

    def test_creeping_improvements_still_converge(self):
        """Test sub-threshold gains accumulate against the last recorded best."""
        tracker = ConvergenceTracker(threshold=0.001, window=3, initial_best=0.5)

        tracker.update(0.5003)
        tracker.update(0.5006)
        assert tracker.last_recorded_best == 0.5
        # 0.5012 - 0.5 clears the threshold
        assert not tracker.update(0.5012)
        assert tracker.stall_count == 0

    def test_reset(self):
        tracker = ConvergenceTracker(threshold=0.001, window=1, initial_best=0.5)
        tracker.update(0.5)
        assert tracker.converged

        tracker.reset(0.7)
        assert not tracker.converged
        assert tracker.stall_count == 0
        assert tracker.last_recorded_best == 0.7

    def test_to_dict(self):
        tracker = ConvergenceTracker(threshold=0.01, window=5, initial_best=0.25)
        data = tracker.to_dict()
        assert data["window"] == 5
        assert data["last_recorded_best"] == 0.25
        assert data["converged"] is False
