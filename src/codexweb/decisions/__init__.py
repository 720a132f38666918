"""Decision module: turning a human's approve/reject into a log update."""

from .models import Decision, DecisionConfirmation, confirmation_text
from .reconciler import DecisionReconciler

__all__ = [
    "Decision",
    "DecisionConfirmation",
    "DecisionReconciler",
    "confirmation_text",
]
