"""lessonflow - Course progression and lesson-gating engine."""

__version__ = "0.1.0"
