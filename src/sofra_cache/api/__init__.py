from .catalog import ORDERS_KEY, PROFILE_KEY, RESTAURANTS_KEY, SofraCatalog, menu_key
from .client import SofraApiClient

__all__ = ["SofraApiClient", "SofraCatalog", "RESTAURANTS_KEY", "PROFILE_KEY", "ORDERS_KEY", "menu_key"]
