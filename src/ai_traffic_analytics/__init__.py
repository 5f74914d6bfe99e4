"""
AI traffic analytics.

Classifies website visits referred by AI assistants or fetched by AI
crawlers, ingests them through a tracking endpoint and aggregates them into
per-site dashboards.
"""

__version__ = "0.1.0"
