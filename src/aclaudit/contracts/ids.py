from __future__ import annotations

CONFIG = "aclaudit.config.v1"
ERROR = "aclaudit.error.v1"
REPORT = "aclaudit.report.v1"
SNAPSHOT = "aclaudit.snapshot.v1"
