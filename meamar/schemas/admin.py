from meamar.schemas.base import CamelModel

class AdminStats(CamelModel):
    total_users: int
    total_vendors: int
    total_products: int
    total_rfqs: int
    pending_approvals: int
    active_vendors: int
