"""
Envelope uniforme de resposta: {success, message, data?, errors?}.

O frontend só sabe ler esse formato, então toda resposta da API
(inclusive erros do framework e rotas inexistentes) passa por aqui.
"""

from typing import Any, List, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(data: Any = None, message: str = "Success", status_code: int = 200) -> JSONResponse:
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=status_code, content=body)


def error(message: str = "Internal server error", status_code: int = 500, **extra: Any) -> JSONResponse:
    body = {"success": False, "message": message}
    body.update(jsonable_encoder(extra))
    return JSONResponse(status_code=status_code, content=body)


def validation_error(errors: List[str], message: str = "Validation errors") -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": message, "errors": list(errors)},
    )


def not_found(message: Optional[str] = "Resource not found") -> JSONResponse:
    return error(message, 404)
