# Import all models here so Base.metadata and relationship() lookups see every table
from meamar.db.session import Base
from meamar.models.user import User
from meamar.models.organization import Organization
from meamar.models.category import Category
from meamar.models.product import Product
from meamar.models.rfq import Rfq, RfqResponse
from meamar.models.order import Order, OrderItem
from meamar.models.message import Message
from meamar.models.review import Review
