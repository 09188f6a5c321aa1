"""
Compliance audit assistant backend.

AI-assisted audit guidance for compliance-framework requirements, with
persistent, resumable chat sessions grounded in the user's selections.
"""

__version__ = "0.1.0"
