# routers/__init__.py
from .electricity import router as electricity_router
from .invoices import router as invoices_router
from .rentals import router as rentals_router
from .utility_rates import router as utility_rates_router

__all__ = [
     "electricity_router",
     "invoices_router",
     "rentals_router",
     "utility_rates_router",
]
