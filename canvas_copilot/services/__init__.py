"""
Services package for canvas_copilot

Provides the end-to-end reconciliation service used by callers that hold a
model response and the current canvas or document.
"""

from canvas_copilot.services.reconciliation_service import (
    ReconciliationService,
    get_reconciliation_service
)

__all__ = [
    'ReconciliationService',
    'get_reconciliation_service'
]
