from fastapi import APIRouter
from wordbook.api.endpoints import catalog, study, users

api_router = APIRouter()
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(study.router, prefix="/study", tags=["study"])
api_router.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
