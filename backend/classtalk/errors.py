from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("classtalk.errors")


class ServiceError(Exception):
	"""Base error rendered as ``{"ok": false, "error": ...}``.

	``raw`` carries unparsed provider output and ``provider_status`` the HTTP
	status an upstream service answered with, when known.
	"""

	status_code = 500

	def __init__(self, message: str, *, raw: Optional[str] = None, provider_status: Optional[int] = None) -> None:
		super().__init__(message)
		self.message = message
		self.raw = raw
		self.provider_status = provider_status

	def to_payload(self) -> Dict[str, Any]:
		payload: Dict[str, Any] = {"ok": False, "error": self.message}
		if self.raw is not None:
			payload["raw"] = self.raw
		if self.provider_status is not None:
			payload["providerStatus"] = self.provider_status
		return payload


class ConfigurationError(ServiceError):
	status_code = 500


class BadRequestError(ServiceError):
	status_code = 400


class NotFoundError(ServiceError):
	status_code = 404


class UpstreamError(ServiceError):
	status_code = 500


class ResponseParseError(ServiceError):
	status_code = 500


def _validation_message(exc: RequestValidationError) -> str:
	parts = []
	for err in exc.errors():
		loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query")]
		field = ".".join(loc)
		parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
	return "; ".join(parts) or "Invalid request"


async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
	if exc.status_code >= 500:
		logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
	return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
	return JSONResponse(status_code=400, content={"ok": False, "error": _validation_message(exc)})


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
	return JSONResponse(
		status_code=exc.status_code,
		content={"ok": False, "error": str(exc.detail)},
		headers=getattr(exc, "headers", None),
	)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
	logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
	return JSONResponse(status_code=500, content={"ok": False, "error": str(exc) or type(exc).__name__})


def install_error_handlers(app: FastAPI) -> None:
	app.add_exception_handler(ServiceError, _service_error_handler)
	app.add_exception_handler(RequestValidationError, _validation_error_handler)
	app.add_exception_handler(StarletteHTTPException, _http_error_handler)
	app.add_exception_handler(Exception, _unhandled_error_handler)
