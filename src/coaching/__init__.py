"""YKS coaching dashboard.

Tracks students' practice exam nets, reading progress and daily question
counts, persisted as one JSON roster.
"""

__version__ = "0.1.0"
