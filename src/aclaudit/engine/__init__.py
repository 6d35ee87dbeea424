"""Compliance engine: reconciliation and audit orchestration."""
from .audit import audit_resource, run_audit
from .reconcile import reconcile_resource, rights_match, rules_match

__all__ = ["audit_resource", "reconcile_resource", "rights_match", "rules_match", "run_audit"]
