from fastapi import APIRouter

from storefront.utils.settings import APP_NAME

router = APIRouter(tags=["health"])


@router.get("/")
def root():
    return {"message": f"Welcome to {APP_NAME}"}


@router.get("/health")
def health():
    return {"status": "ok"}
