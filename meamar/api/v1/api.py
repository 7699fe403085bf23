from fastapi import APIRouter
from meamar.api.v1.endpoints import (
    auth,
    category,
    message,
    order,
    organization,
    payment,
    product,
    review,
    rfq,
    upload,
    user,
)

api_router = APIRouter()

# Identity: /auth/user, /login, /callback, /logout
api_router.include_router(auth.router, tags=["authentication"])

# Catalog (public reads, authenticated writes)
api_router.include_router(organization.router, prefix="/organizations", tags=["organizations"])
api_router.include_router(category.router, prefix="/categories", tags=["categories"])
api_router.include_router(product.router, prefix="/products", tags=["products"])

# RFQs and their quotes
api_router.include_router(rfq.router, prefix="/rfqs", tags=["rfqs"])

# Buyer/vendor workflows (authentication checked per route)
api_router.include_router(order.router, prefix="/orders", tags=["orders"])
api_router.include_router(message.router, prefix="/messages", tags=["messages"])
api_router.include_router(review.router, prefix="/reviews", tags=["reviews"])

# Admin: /users, /admin/stats
api_router.include_router(user.router, tags=["admin"])

# Collaborators
api_router.include_router(upload.router, tags=["uploads"])
api_router.include_router(payment.router, tags=["payments"])

# Mounted at the application root, outside the API prefix
objects_router = upload.objects_router
