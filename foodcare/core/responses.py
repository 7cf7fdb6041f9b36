from fastapi.responses import JSONResponse

from foodcare.schemas.shared import FailureResponse


def failure_response(status_code: int, message: str) -> JSONResponse:
    """``{"success": false, "message": ...}`` with the given status code."""
    return JSONResponse(
        status_code=status_code,
        content=FailureResponse(message=message).model_dump(by_alias=True),
    )
