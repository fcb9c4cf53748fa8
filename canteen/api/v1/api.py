from fastapi import APIRouter
from canteen.api.v1.endpoints import health
from canteen.api.v1.endpoints.canteen import analysis, balance, employees, feeding_events, tickets

api_router = APIRouter()

api_router.include_router(health.router, tags=["System"])

# Canteen routes
api_router.include_router(employees.router, prefix="/canteen/employees", tags=["Canteen"])
api_router.include_router(balance.router, prefix="/canteen/balance", tags=["Canteen"])
api_router.include_router(tickets.router, prefix="/canteen/tickets", tags=["Canteen"])
api_router.include_router(feeding_events.router, prefix="/canteen/feeding-events", tags=["Canteen"])
api_router.include_router(analysis.router, prefix="/canteen/analysis", tags=["Canteen Analytics"])
