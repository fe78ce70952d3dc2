# timereport/main.py
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
import uvicorn

from timereport.api.v1.api import api_router
from timereport.core.config import settings
from timereport.core.errors import DataIntegrityError, InvalidRangeError, ReportError, TransientFetchError
from timereport.core.logging_config import setup_logging

setup_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)

app = FastAPI(title="Time Report API")

# Include the main router for all routes prefixed with /api/v1
app.include_router(api_router, prefix="/api/v1")

ERROR_STATUS = {
    InvalidRangeError: status.HTTP_400_BAD_REQUEST,
    DataIntegrityError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    TransientFetchError: status.HTTP_503_SERVICE_UNAVAILABLE,
}

@app.exception_handler(ReportError)
async def report_error_handler(request: Request, exc: ReportError):
    code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=code, content={"detail": exc.message, "kind": exc.kind})

@app.get("/")
def read_root():
    return {"message": "Welcome to the Time Report API"}

def serve():
    """Console entry point: runs the API with uvicorn."""
    uvicorn.run("timereport.main:app", host="0.0.0.0", port=8000)
