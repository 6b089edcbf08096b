# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning pattern analysis.

Turns a learner's stored history into a LearningAnalysis used to adapt
tone, difficulty and encouragement of tutor replies.
"""

from emotutor.core.learning.analysis import (
    EngagementLevel,
    LearningAnalysis,
    LearningThresholds,
    LearningVelocity,
    PerformanceLevel,
    analyze_learning_patterns,
    average_quiz_score,
    classify_engagement,
    classify_performance,
    classify_velocity,
    count_completed_lessons,
    most_frequent,
)

__all__ = [
    "EngagementLevel",
    "LearningAnalysis",
    "LearningThresholds",
    "LearningVelocity",
    "PerformanceLevel",
    "analyze_learning_patterns",
    "average_quiz_score",
    "classify_engagement",
    "classify_performance",
    "classify_velocity",
    "count_completed_lessons",
    "most_frequent",
]
