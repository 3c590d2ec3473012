# Import all models here to ensure SQLAlchemy can set up relationships correctly
from app.api.categories.models import Category
from app.api.coupons.models import Coupon
from app.api.networks.models import Network
from app.api.seo.models import SEOTemplate
from app.api.stores.models import Store

# Re-export all models
__all__ = [
    'Category',
    'Coupon',
    'Network',
    'SEOTemplate',
    'Store',
]
