# doc_a11y/app.py

# Standard library imports
import logging
import os

# Third-party imports
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Local application imports
from doc_a11y.config import configure_logging, get_settings
from doc_a11y.routes import health_router, scans_router

# ----------------------
# Logging & Config
# ----------------------
settings = get_settings()
configure_logging(settings)
logger = logging.getLogger("doc-a11y-api")

# ----------------------
# FastAPI app + CORS
# ----------------------
app = FastAPI(title="Doc A11y Checker API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(scans_router)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to analyze document. Please ensure it is a valid file."},
    )


# ----------------------
# Run locally with: python -m doc_a11y.app
# ----------------------
if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 5000))
    uvicorn.run("doc_a11y.app:app", host="0.0.0.0", port=port, reload=True)
