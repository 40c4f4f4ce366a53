from fastapi import APIRouter
from formrelay.api.v1.endpoints import forms

api_router = APIRouter()

api_router.include_router(forms.router, tags=["Forms"])
