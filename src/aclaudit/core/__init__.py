"""Aclaudit core package."""
