"""
Router utility functions.

Contains helpers shared by router endpoints to keep them clean.
"""

from audit_assistant.api.routers.router_utils.error_handling import handle_audit_errors

__all__ = ["handle_audit_errors"]
