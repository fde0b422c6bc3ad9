# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .document_service import DocumentService

__all__ = [
    "DocumentService",
]
