"""Versioned JSON contracts for aclaudit inputs and outputs."""
