from .dto import MembershipChange, ReconcileReport, RuleFailure
from .reconciler import AutoIssueReconciler

__all__ = ["AutoIssueReconciler", "MembershipChange", "ReconcileReport", "RuleFailure"]
