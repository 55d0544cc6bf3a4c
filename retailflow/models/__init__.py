"""Models package - exports all SQLAlchemy models."""
# Accounts
from retailflow.models.user_role import UserRole
from retailflow.models.user import User

# Catalog
from retailflow.models.category import ProductCategory
from retailflow.models.product import Product, is_discount_allowed

# Parties
from retailflow.models.supplier import Supplier
from retailflow.models.customer import Customer

# Documents
from retailflow.models.code_format import CodeFormat, CodeType, DEFAULT_CODE_FORMATS, DEFAULT_CODE_LENGTH, format_code
from retailflow.models.purchase_order import PurchaseOrder
from retailflow.models.purchase_order_line import PurchaseOrderLine
from retailflow.models.sales_invoice import SalesInvoice
from retailflow.models.cart_item import CartItem

__all__ = [
    'UserRole', 'User',
    'ProductCategory', 'Product', 'is_discount_allowed',
    'Supplier', 'Customer',
    'CodeFormat', 'CodeType', 'DEFAULT_CODE_FORMATS', 'DEFAULT_CODE_LENGTH', 'format_code',
    'PurchaseOrder', 'PurchaseOrderLine',
    'SalesInvoice', 'CartItem',
]
