"""Approval policy: which proposals the approval mode lets through unreviewed."""

from .policy import AUTO_APPROVED_KINDS, ApprovalPolicy

__all__ = ["AUTO_APPROVED_KINDS", "ApprovalPolicy"]
