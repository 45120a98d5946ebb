from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from speccheck.config import settings, setup_logging
from apps.api.routers import analyze, claims

setup_logging(settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-API-Key"],
)

app.include_router(claims.router, prefix="/claims", tags=["claims"])
app.include_router(analyze.router, prefix="/analyze", tags=["analyze"])

@app.get("/")
def root():
    return {"status": "ok", "service": "speccheck-api"}

@app.get("/health")
def health():
    return {"status": "healthy", "environment": settings.environment}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
