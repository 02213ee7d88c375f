"""Score calculator for repository health metrics."""

from gitgrade.models.schemas import MetricsRecord, ScoreComponent


class Scorer:
    """Calculates a 0-100 repository score from collected metrics.

    Dimension caps (total 100):
    - README: 20
    - Commit volume: 25
    - Recent activity: 15
    - Tests: 20
    - CI/CD: 10
    - Branch usage: 5
    - Pull requests: 5
    """

    CAPS = {
        "readme": 20,
        "commit_volume": 25,
        "recent_activity": 15,
        "tests": 20,
        "cicd": 10,
        "branches": 5,
        "pull_requests": 5,
    }

    MAX_SCORE = 100

    def calculate_score(self, metrics: MetricsRecord) -> int:
        """Calculate the overall score.

        Args:
            metrics: Repository metrics.

        Returns:
            Sum of all dimension points, clamped to 100.
        """
        total = sum(component.points for component in self.breakdown(metrics))
        return min(self.MAX_SCORE, total)

    def breakdown(self, metrics: MetricsRecord) -> list[ScoreComponent]:
        """Points for each dimension, in table order."""
        points = {
            "readme": self._readme_points(metrics),
            "commit_volume": self._commit_volume_points(metrics),
            "recent_activity": self._recent_activity_points(metrics),
            "tests": 20 if metrics.has_tests else 0,
            "cicd": 10 if metrics.has_cicd else 0,
            "branches": self._branch_points(metrics),
            "pull_requests": self._pull_request_points(metrics),
        }
        return [
            ScoreComponent(dimension=name, points=value, cap=self.CAPS[name])
            for name, value in points.items()
        ]

    def _readme_points(self, metrics: MetricsRecord) -> int:
        if not metrics.has_readme:
            return 0
        if metrics.readme_length > 1000:
            return 20
        if metrics.readme_length > 500:
            return 15
        return 10

    def _commit_volume_points(self, metrics: MetricsRecord) -> int:
        """Commit volume from the fetched page.

        Small repositories always get at least 5 points, even with no commits.
        """
        commits = metrics.total_commits
        if commits >= 100:
            return 25
        if commits >= 50:
            return 20
        if commits >= 20:
            return 15
        return max(5, commits // 2)

    def _recent_activity_points(self, metrics: MetricsRecord) -> int:
        recent = metrics.recent_commits
        if recent > 20:
            return 15
        if recent > 10:
            return 10
        if recent > 0:
            return 5
        return 0

    def _branch_points(self, metrics: MetricsRecord) -> int:
        if metrics.branch_count > 3:
            return 5
        if metrics.branch_count > 1:
            return 3
        return 0

    def _pull_request_points(self, metrics: MetricsRecord) -> int:
        if metrics.total_prs > 10:
            return 5
        if metrics.total_prs > 0:
            return 3
        return 0
