#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Exception taxonomy for the viewremote invocation client.

Every failure surfaced by input resolution or by a view invocation is one of
the classes below. Foreign exceptions (OS errors, gRPC status errors, protobuf
decode errors) are converted with ``ExceptionTranslator`` so callers only ever
handle ``ViewRemoteError`` subclasses. The original exception is kept as
``cause`` and chained with ``raise ... from``.
"""

from typing import Any, Dict, List, Optional

import grpc


class ViewRemoteError(Exception):
    """
    Base class for every error raised by viewremote.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context: Dict[str, Any] = {k: v for k, v in context.items() if v is not None}

    def __str__(self) -> str:
        return self.message


class MissingParameter(ViewRemoteError):
    """Endpoint or function name absent."""

    def __init__(self, parameter: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"{parameter} must be specified", parameter=parameter)
        self.parameter = parameter


class InputReadError(ViewRemoteError):
    """Standard-input stream could not be read to the end."""


class IdentityLoadError(ViewRemoteError):
    """Signing certificate or key missing, unreadable or invalid."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, cause=cause, path=path)
        self.path = path


class ConfigurationError(ViewRemoteError):
    """Client configuration is missing a required value or cannot be parsed."""


class ConnectionTimeout(ViewRemoteError):
    """Secure channel not established within the connect timeout."""

    def __init__(self, address: str, timeout_seconds: float, cause: Optional[BaseException] = None) -> None:
        super().__init__(
            f"could not connect to {address} within {timeout_seconds:g}s",
            cause=cause,
            address=address,
            timeout_seconds=timeout_seconds,
        )
        self.address = address
        self.timeout_seconds = timeout_seconds


class TransportError(ViewRemoteError):
    """Network or channel failure."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        super().__init__(message, cause=cause, code=code, **context)
        self.code = code


class TrustRootError(TransportError):
    """CA trust root missing or not a certificate; no secure channel possible."""

    def __init__(self, path: str, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message, cause=cause, path=path)
        self.path = path


class ResponseTimeout(TransportError):
    """No response arrived before the caller's deadline."""

    def __init__(self, function_name: str, timeout_seconds: float, cause: Optional[BaseException] = None) -> None:
        super().__init__(
            f"no response for '{function_name}' within {timeout_seconds:g}s",
            code=grpc.StatusCode.DEADLINE_EXCEEDED.name,
            cause=cause,
            function_name=function_name,
        )
        self.timeout_seconds = timeout_seconds


class ApplicationError(ViewRemoteError):
    """The remote node reported a failure executing the view."""

    def __init__(self, function_name: str, remote_message: str) -> None:
        super().__init__(
            f"view '{function_name}' failed on remote node: {remote_message}",
            function_name=function_name,
        )
        self.function_name = function_name
        self.remote_message = remote_message


class DecodeError(ViewRemoteError):
    """The response could not be interpreted."""


class ExceptionTranslator:
    """
    Converts foreign exceptions into the viewremote taxonomy.
    """

    @staticmethod
    def as_transport_error(exc: BaseException, address: str, function_name: Optional[str] = None) -> TransportError:
        if isinstance(exc, grpc.RpcError) and hasattr(exc, "code"):
            code = exc.code()
            details = exc.details() if hasattr(exc, "details") else None
            code_name = code.name if code is not None else None
            return TransportError(
                f"call to {address} failed with {code_name}: {details or 'no details'}",
                code=code_name,
                cause=exc,
                address=address,
                function_name=function_name,
            )
        return TransportError(
            f"call to {address} failed: {exc}",
            cause=exc,
            address=address,
            function_name=function_name,
        )

    @staticmethod
    def as_decode_error(exc: BaseException, message: str) -> DecodeError:
        return DecodeError(f"{message}: {exc}", cause=exc)

    @staticmethod
    def as_identity_error(exc: BaseException, path: str, message: str) -> IdentityLoadError:
        return IdentityLoadError(f"{message} ({path}): {exc}", path=path, cause=exc)


class ExceptionFormatter:
    """
    Human readable renderings of exceptions for the command line.
    """

    @staticmethod
    def format_exception(exc: BaseException) -> str:
        return f"{type(exc).__name__}: {exc}"

    @staticmethod
    def format_exception_chain(exc: BaseException) -> List[str]:
        chain: List[str] = []
        seen = set()
        current: Optional[BaseException] = exc
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            chain.append(ExceptionFormatter.format_exception(current))
            current = current.__cause__ or current.__context__
        return chain

    @staticmethod
    def format_exception_summary(exc: BaseException) -> str:
        return " <- ".join(ExceptionFormatter.format_exception_chain(exc))


__all__ = [
    "ViewRemoteError",
    "MissingParameter",
    "InputReadError",
    "IdentityLoadError",
    "ConfigurationError",
    "ConnectionTimeout",
    "TransportError",
    "TrustRootError",
    "ResponseTimeout",
    "ApplicationError",
    "DecodeError",
    "ExceptionTranslator",
    "ExceptionFormatter",
]
