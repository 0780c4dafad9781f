"""
API Gateway component.
"""

from feedbackhub.api_gateway.gateway import app, run_gateway

__all__ = ["app", "run_gateway"]
