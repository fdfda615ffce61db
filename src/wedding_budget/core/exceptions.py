"""
Custom exception types for wedding-budget.

Every exception carries a machine-readable code so callers can
handle specific failure modes programmatically.  The allocation engine
itself never raises; these belong to the plan, config and catalog
boundaries around it.
"""


class WeddingBudgetError(Exception):
    """Base exception for all wedding-budget errors."""

    def __init__(self, message: str, code: str = "WEDDING_BUDGET_ERROR"):
        self.code = code
        super().__init__(message)


class PlanValidationError(WeddingBudgetError):
    """Raised when an allocation plan file or payload is malformed."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, code="PLAN_VALIDATION_ERROR")


class ConfigError(WeddingBudgetError):
    """Raised when a configuration file cannot be loaded."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message, code="CONFIG_ERROR")


class UnknownCategoryError(WeddingBudgetError):
    """Raised when a category id is not part of the master catalog."""

    def __init__(self, category_id: str):
        self.category_id = category_id
        msg = f"Category '{category_id}' is not in the master catalog"
        super().__init__(msg, code="UNKNOWN_CATEGORY")
