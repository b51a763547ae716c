from fastapi import FastAPI

from docuextract_analytics.core.logging import setup_logging
from docuextract_analytics.modules.analytics.router import router as analytics_router

setup_logging()

app = FastAPI(title="DocuExtract Analytics API")

app.include_router(analytics_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
