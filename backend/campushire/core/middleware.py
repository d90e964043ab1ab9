"""
Custom middleware for request processing
"""
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
import structlog

from campushire.core.exceptions import CampusHireException

logger = structlog.get_logger()


def error_response(exc: CampusHireException) -> JSONResponse:
    """Render an application exception in the API error envelope"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "message": exc.message,
                "details": exc.details,
                "type": exc.__class__.__name__,
            }
        },
    )


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Add correlation ID to requests for tracing"""
    
    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
        
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log request start, finish and failure"""
    
    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        logger.info("request_started", method=request.method, path=request.url.path)
        
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                process_time=round(time.perf_counter() - start_time, 4),
            )
            raise
        
        process_time = round(time.perf_counter() - start_time, 4)
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time=process_time,
        )
        response.headers["X-Process-Time"] = str(process_time)
        return response


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Turn escaped exceptions into JSON error responses"""
    
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except CampusHireException as e:
            return error_response(e)
        except Exception as e:
            logger.exception("unhandled_exception", error=str(e))
            return JSONResponse(
                status_code=500,
                content={
                    "error": {
                        "message": "Internal server error",
                        "type": "InternalServerError",
                    }
                },
            )
