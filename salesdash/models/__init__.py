from salesdash.models.sale import SaleRecord

__all__ = ["SaleRecord"]
