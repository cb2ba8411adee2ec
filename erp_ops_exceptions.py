"""
ERP Operations Exceptions

This module defines the root exceptions for the ERP_Ops package
to provide clear error handling and reporting.
"""


class ErpOpsError(Exception):
    """Base exception for all ERP_Ops errors"""
    pass


class ConfigurationError(ErpOpsError):
    """Raised when configuration is invalid or missing"""
    pass

