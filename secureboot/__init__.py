"""SecureBoot dashboard: remediation workflow engine and API."""

__version__ = "1.0.0"
