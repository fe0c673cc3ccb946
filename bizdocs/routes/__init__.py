from fastapi import APIRouter

from ..services.kinds import KINDS
from .company import router as company_router
from .documents import build_router
from .parties import customers_router, suppliers_router

api_router = APIRouter()
api_router.include_router(company_router, tags=["company"])
api_router.include_router(customers_router, tags=["customers"])
api_router.include_router(suppliers_router, tags=["suppliers"])
for kind in KINDS.values():
    api_router.include_router(build_router(kind), tags=[kind.slug])
