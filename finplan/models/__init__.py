from finplan.models.debt import PayoffMethod  # noqa: F401
from finplan.models.forecast import AlertSeverity, AlertType  # noqa: F401
from finplan.models.recurring import Frequency  # noqa: F401
from finplan.models.transaction import TransactionType  # noqa: F401
