from .donors import router as donors_router
from .blood_requests import router as blood_requests_router
