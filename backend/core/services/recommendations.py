"""
Recommendation Policy

Maps metrics and their feedback levels to coaching hints and a priority.
This is presentation policy, so it's pluggable: SprintAnalyzer accepts
any object implementing RecommendationPolicy.
"""

from typing import Protocol

from ..domain.analysis import (
    AnalysisPriority,
    Metric,
    MetricFeedback,
    SprintMetrics,
)


class RecommendationPolicy(Protocol):
    """Turns a metrics record and its feedback into advice."""

    def recommend(
        self,
        metrics: SprintMetrics,
        feedback: dict[Metric, MetricFeedback],
    ) -> tuple[list[str], AnalysisPriority]:
        ...


class DefaultRecommendationPolicy:
    """
    Default coaching hints for sprint form.

    One hint per metric that isn't OPTIMAL or GOOD, ordered by the
    metric's weight in the overall score. Priority follows the overall score.
    """

    # Metrics in the order their hints are reported
    METRIC_ORDER = (Metric.KNEE_ANGLE, Metric.HIP_VELOCITY, Metric.ARM_SYMMETRY)

    HINTS = {
        (Metric.KNEE_ANGLE, MetricFeedback.TOO_LOW):
            "Knee is collapsing too far - drive the knee forward and land under the hip.",
        (Metric.KNEE_ANGLE, MetricFeedback.TOO_HIGH):
            "Leg is too straight - keep a slight knee bend through ground contact.",
        (Metric.HIP_VELOCITY, MetricFeedback.TOO_LOW):
            "Hip speed is low - push harder off the ground and keep the hips tall.",
        (Metric.ARM_SYMMETRY, MetricFeedback.ACCEPTABLE):
            "Arm swing is slightly uneven - match elbow bend on both sides.",
        (Metric.ARM_SYMMETRY, MetricFeedback.TOO_HIGH):
            "Arm swing is unbalanced - drive both arms from the shoulder with a 90 degree elbow.",
    }

    UNMEASURABLE_ARMS_HINT = (
        "Arms weren't fully visible - film from the side with both arms in frame."
    )
    MAINTAIN_HINT = "Good form - maintain your current technique."

    # Overall score below each bound maps to the priority
    PRIORITY_BOUNDS = (
        (40.0, AnalysisPriority.CRITICAL),
        (60.0, AnalysisPriority.HIGH),
        (80.0, AnalysisPriority.MEDIUM),
    )

    def recommend(
        self,
        metrics: SprintMetrics,
        feedback: dict[Metric, MetricFeedback],
    ) -> tuple[list[str], AnalysisPriority]:
        recommendations = []

        for metric in self.METRIC_ORDER:
            level = feedback.get(metric)
            if metric == Metric.ARM_SYMMETRY and not metrics.arm_symmetry_measured:
                recommendations.append(self.UNMEASURABLE_ARMS_HINT)
                continue
            hint = self.HINTS.get((metric, level))
            if hint:
                recommendations.append(hint)

        if not recommendations:
            recommendations.append(self.MAINTAIN_HINT)

        return recommendations, self.priority_for(metrics.overall_score)

    def priority_for(self, score: float) -> AnalysisPriority:
        for bound, priority in self.PRIORITY_BOUNDS:
            if score < bound:
                return priority
        return AnalysisPriority.LOW
