"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class CronAuthorizationError(DomainException):
    """Scheduled job request did not carry a valid bearer token"""

    pass


class PermissionDeniedError(DomainException):
    """Entity role does not grant the requested permission"""

    def __init__(self, role: str, permission: str):
        super().__init__(f"Role '{role}' lacks permission '{permission}'")
        self.role = role
        self.permission = permission


class AlertNotFoundError(DomainException):
    """Anomaly alert does not exist"""

    pass


class TaxTableNotFoundError(DomainException):
    """No tax rates are held for the requested financial year"""

    def __init__(self, financial_year: int):
        super().__init__(f"Tax tables not available for FY{financial_year}")
        self.financial_year = financial_year
