import enum


class PayoffMethod(str, enum.Enum):
    """Ordering used to decide which debt receives the extra payment.

    avalanche: highest interest rate first
    snowball: smallest remaining balance first
    """
    avalanche = "avalanche"
    snowball = "snowball"
