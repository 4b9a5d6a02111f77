import uvicorn
import time
import logging
from fastapi import FastAPI, Request
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.upload_defects import router as upload_router
from app.api.defects import router as defects_router
from app.api.analyze_defects import router as analyze_router
from app.utils.logging_config import setup_logging

# Level and log file come from LOG_LEVEL / LOG_DIR / LOG_TO_FILE
setup_logging()
logger = logging.getLogger("main")

app = FastAPI(title="Defect Log Analyzer API")

# ---------------------------------------------------------------------------
# Request Logging Middleware
# ---------------------------------------------------------------------------
class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        client_host = request.client.host if request.client else "unknown"
        body_size = request.headers.get("content-length", "0")
        logger.info(f"Incoming: {request.method} {request.url.path} from {client_host} ({body_size} bytes)")

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path} - Error: {str(e)}")
            raise

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.2f}"
        log = logger.warning if response.status_code >= 400 else logger.info
        log(f"Outgoing: {request.method} {request.url.path} - Status: {response.status_code} - Time: {elapsed_ms:.2f}ms")
        return response

app.add_middleware(LoggingMiddleware)

# ---------------------------------------------------------------------------
# CORS — browser frontend (Vite dev server on 8080 / 5173)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:8080",
        "http://127.0.0.1:8080",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time-Ms"],
)

@app.get("/health")
async def health_check():
    return {"status": "ok"}

app.include_router(upload_router)
app.include_router(defects_router)
app.include_router(analyze_router)

if __name__ == "__main__":
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
