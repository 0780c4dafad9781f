"""
Feedback Hub: product feedback collection with AI-written insights.
"""

__version__ = "1.0.0"
