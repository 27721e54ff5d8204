# chaoscrypt/api/v1/api.py
from fastapi import APIRouter
from chaoscrypt.api.v1.endpoints import cipher, keys

api_router = APIRouter()
api_router.include_router(cipher.router, prefix="/cipher", tags=["cipher"])
api_router.include_router(keys.router, prefix="/keys", tags=["keys"])
