from .loader import AuditConfig, PowerShellConfig, load_config

__all__ = ["AuditConfig", "PowerShellConfig", "load_config"]
