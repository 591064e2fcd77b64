# comissoes/api.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from comissoes.calculo.router import router as calculo_router
from comissoes.config import settings

app = FastAPI(title=settings.APP_NAME, version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(calculo_router)


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.APP_NAME}
