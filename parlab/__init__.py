"""Task framework for parallel programming exercises: ordered task stages, timing, reference tasks and an in-process message-passing world."""

__version__ = "0.1.0"