"""
FastAPI routes for payment instruction processing.
Thin transport layer: request validation, status mapping and error handlers.
"""
from datetime import date, datetime, timezone

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.exceptions import PaymentInstructionException
from core.logger import setup_logger
from core.schema import PaymentInstructionRequest, TransactionResult
from services.payment_service import PaymentInstructionService

logger = setup_logger(__name__)
settings = get_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Payment Instruction Processing",
    description="Parse free-text payment instructions and compute account transfers",
    version="1.0.0"
)

if settings.enable_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Service instance
payment_service = PaymentInstructionService()


def get_reference_date() -> date:
    """Current UTC calendar date; overridden in tests to pin the clock."""
    return datetime.now(timezone.utc).date()


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Reject malformed request bodies with field-level details."""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid request body",
            "details": jsonable_errors(exc),
        },
    )


@app.exception_handler(PaymentInstructionException)
async def payment_error_handler(request: Request, exc: PaymentInstructionException):
    """Internal faults raised while processing an instruction."""
    logger.error(f"Payment instruction error on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": exc.message},
    )


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    """Catch-all that never leaks internal details."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def jsonable_errors(exc: RequestValidationError):
    """Reduce pydantic errors to location, message and type."""
    return [
        {
            "loc": list(error.get("loc", ())),
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "payment_instructions",
        "version": "1.0.0"
    }


@app.post("/payment-instructions", response_model=TransactionResult)
async def process_payment_instruction(
    payload: PaymentInstructionRequest,
    reference_date: date = Depends(get_reference_date)
):
    """
    Process a payment instruction against the supplied accounts.

    Failed transactions are answered with 400, successful and pending
    ones with 200. The body is the transaction result in both cases.
    """
    result = payment_service.process(payload.accounts, payload.instruction, reference_date)

    http_status = status.HTTP_400_BAD_REQUEST if result.is_failed else status.HTTP_200_OK

    logger.info(f"Payment instruction response: status={result.status} status_code={result.status_code}")

    return JSONResponse(status_code=http_status, content=result.model_dump(mode="json"))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
