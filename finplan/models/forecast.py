import enum


class AlertType(str, enum.Enum):
    low_balance = "low_balance"
    surplus = "surplus"


class AlertSeverity(str, enum.Enum):
    warning = "warning"
    info = "info"
