"""Router with UploadSet injection and response handling."""

import inspect
import io
import mimetypes
from collections.abc import Callable
from functools import wraps
from typing import Any

import orjson
from robyn import Request, Response, SubRouter, status_codes
from robyn.robyn import HttpMethod

from uploadfiles.core.errors import ViolationError, WriteFailure
from uploadfiles.models.core import RawFileDescriptor, UploadConfig
from uploadfiles.services.upload_set import UploadSet, build_upload_set

JSON_HEADERS = {"content-type": "application/json"}


def upload_parameters(sig: inspect.Signature) -> set[str]:
    """Names of the handler parameters annotated with UploadSet."""
    return {name for name, param in sig.parameters.items() if param.annotation is UploadSet}


def descriptors_from_files(files: dict[str, bytes] | None) -> list[RawFileDescriptor]:
    """Wrap Robyn's decoded ``request.files`` (filename -> content) as raw descriptors."""
    descriptors = []
    for filename, data in (files or {}).items():
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        descriptors.append(
            RawFileDescriptor(
                filename=filename,
                size=len(data),
                opener=lambda data=data: io.BytesIO(data),
                header={"Content-Type": content_type},
            )
        )
    return descriptors


def upload_set_from_request(request: Request, config: UploadConfig, field: str) -> UploadSet:
    """Build the upload set of a request; a request without parsed files gives an empty set.

    Robyn does not keep multipart field names, so every file lands under ``field``.
    """
    files = getattr(request, "files", None)
    return build_upload_set({field: descriptors_from_files(files)}, config)


def parse_request_files(
    file_params: set[str],
    request: Request,
    kwargs: dict[str, Any],
    config: UploadConfig,
) -> None:
    """Inject an UploadSet built from request.files into each upload parameter."""
    for param_name in file_params:
        kwargs[param_name] = upload_set_from_request(request, config, field=param_name)


def json_response(status_code: int, payload: dict) -> Response:
    return Response(status_code=status_code, headers=JSON_HEADERS, description=orjson.dumps(payload).decode())


def violation_response(violation: ViolationError) -> Response:
    return json_response(413, violation.to_dict())


def write_failure_response(failure: WriteFailure) -> Response:
    status_code = 409 if failure.already_exists else 500
    return json_response(status_code, {"error": "write_failed", "field": failure.field, "detail": str(failure.cause)})


def parse_response(result: Any) -> Response:
    """Convert handler result to Response."""
    match result:
        case Response():
            return result
        case ViolationError():
            return violation_response(result)
        case WriteFailure():
            return write_failure_response(result)
        case dict():
            return json_response(status_codes.HTTP_200_OK, result)
        case _:
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={},
                description=str(result),
            )


HTTP_METHODS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
    HttpMethod.PATCH,
)


def _create_method_wrapper(original_method: Callable, config: UploadConfig) -> Callable:
    @wraps(original_method)
    def method_wrapper(*args, **kwargs) -> Callable:
        decorator = original_method(*args, **kwargs)

        def handler_decorator(handler: Callable) -> Callable:
            sig = inspect.signature(handler)
            file_params = upload_parameters(sig)
            has_request_param = "request" in sig.parameters

            @wraps(handler)
            async def wrapped_handler(request: Request, **h_kwargs):
                parse_request_files(file_params, request, h_kwargs, config)

                # Pass request to handler only if it declared it
                if has_request_param:
                    h_kwargs["request"] = request

                result = await handler(**h_kwargs)
                return parse_response(result)

            # Robyn injects by signature: expose request, hide upload parameters
            new_params = [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
            new_params += [
                param for name, param in sig.parameters.items() if name != "request" and name not in file_params
            ]

            wrapped_handler.__signature__ = sig.replace(parameters=new_params)  # type: ignore[attr-defined]
            return decorator(wrapped_handler)

        return handler_decorator

    return method_wrapper


class Router(SubRouter):
    """SubRouter that injects an UploadSet and renders violations and write failures."""

    def __init__(self, *args, upload_config: UploadConfig | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.upload_config = upload_config or UploadConfig()
        self._wrap_methods()

    def _wrap_methods(self) -> None:
        """Wrap HTTP methods with upload injection."""
        for method in HTTP_METHODS:
            method_name = str(method).split(".")[-1].lower()
            if hasattr(self, method_name):
                original_method = getattr(self, method_name)
                setattr(self, method_name, _create_method_wrapper(original_method, self.upload_config))
