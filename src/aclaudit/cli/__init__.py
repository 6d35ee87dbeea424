"""Command-line interface for aclaudit."""
