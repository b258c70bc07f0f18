#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
View invocation client.

One ``invoke`` call is one attempt:

    IDLE -> VALIDATING -> CONNECTING -> SENDING -> AWAITING_RESPONSE
         -> COMPLETED | FAILED

Any failure moves straight to FAILED and the classified ``ViewRemoteError``
propagates to the caller. There is no retry loop.

Protocol:
    The client wraps the call in a ``Command`` whose header carries a
    timestamp, a random nonce, the caller's certificate and a hash of that
    certificate binding the command to the TLS session. The serialized command
    is signed with the caller's key and sent as a ``SignedCommand`` over the
    ``ProcessCommand`` unary method. The node answers with a
    ``SignedCommandResponse`` whose header echoes the hash of the command.

Usage:
    >>> client = ViewClient(
    ...     ConnectionConfig.build("node1:7051", "ca.pem"),
    ...     X509SigningIdentity.load("client.pem", "client.key"),
    ... )
    >>> result = client.invoke("init", b"hello")
"""

import secrets
import time
from typing import Callable, Optional

import grpc
from google.protobuf.message import DecodeError as ProtobufDecodeError

from ..crypto.hashing import HashProvider, Sha256HashProvider
from ..crypto.identity import X509SigningIdentity
from ..data.backends import JSONBackend, SerializationBackend
from ..data.models import (
    ByteSequenceResult,
    InvocationAttempt,
    InvocationRequest,
    InvocationResult,
    InvocationState,
    ValueResult,
)
from ..protos import view_messages
from ..utils.exceptions import (
    ApplicationError,
    DecodeError,
    ExceptionTranslator,
    IdentityLoadError,
    MissingParameter,
    ResponseTimeout,
    ViewRemoteError,
)
from ..utils.logger import ModernLogger
from .connection import ChannelFactory, ConnectionConfig, SecureChannelFactory

NONCE_SIZE = 32


class ViewClient(ModernLogger):
    """
    Synchronous client invoking views on a single node.

    The client holds no per-call state; every ``invoke`` tracks its progress in
    its own ``InvocationAttempt``, opens its own channel and closes it before
    returning.
    """

    def __init__(
        self,
        connection: Optional[ConnectionConfig],
        identity: Optional[X509SigningIdentity],
        hash_provider: Optional[HashProvider] = None,
        channel_factory: Optional[ChannelFactory] = None,
        response_timeout: Optional[float] = None,
        log_level: Optional[str] = None,
        state_listener: Optional[Callable[[InvocationAttempt], None]] = None,
    ) -> None:
        """
        Args:
            connection: Where and how to connect
            identity: Credential presented to the node and used for signing
            hash_provider: Digest used by the protocol, SHA-256 by default
            channel_factory: Opens channels, ``SecureChannelFactory`` by default
            response_timeout: Default deadline in seconds for the response,
                ``None`` waits indefinitely
            log_level: Optional level for this client's logger
            state_listener: Called with the call's attempt after every state
                transition
        """
        super().__init__(name="client", level=log_level)
        self.connection = connection
        self.identity = identity
        self.hash_provider = hash_provider or Sha256HashProvider()
        self.channel_factory = channel_factory or SecureChannelFactory()
        self.response_timeout = response_timeout
        self.state_listener = state_listener
        self._results: SerializationBackend = JSONBackend()

    def _advance(self, attempt: InvocationAttempt, new_state: InvocationState) -> None:
        previous = attempt.advance(new_state)
        self.debug(
            "Invocation of '%s': %s -> %s", attempt.function_name, previous.value, new_state.value
        )
        if self.state_listener is not None:
            self.state_listener(attempt)

    def invoke(
        self,
        function_name: str,
        payload: Optional[bytes] = None,
        timeout: Optional[float] = None,
    ) -> InvocationResult:
        """
        Invoke ``function_name`` on the node with ``payload``.

        Args:
            function_name: Name of the view
            payload: Input bytes, ``None`` for no input
            timeout: Response deadline in seconds, overrides ``response_timeout``

        Raises:
            MissingParameter: Empty function name or no connection/address.
            IdentityLoadError: No signing identity.
            ConnectionTimeout: Channel not ready within ``connect_timeout``.
            TransportError: Channel or RPC failure (``ResponseTimeout`` when
                the deadline expires).
            ApplicationError: The node reported a failure.
            DecodeError: The response could not be interpreted.
        """
        attempt = InvocationAttempt(function_name)
        try:
            self._advance(attempt, InvocationState.VALIDATING)
            request = self._validate(function_name, payload)

            self._advance(attempt, InvocationState.CONNECTING)
            channel = self.channel_factory.open(self.connection, self.identity)
            try:
                result = self._call(attempt, channel, request, timeout)
            finally:
                channel.close()
        except ViewRemoteError as exc:
            self._advance(attempt, InvocationState.FAILED)
            self.error("View '%s' failed: %s", function_name, exc)
            raise
        except Exception as exc:
            self._advance(attempt, InvocationState.FAILED)
            self.error("View '%s' failed unexpectedly: %s", function_name, exc, exc_info=True)
            raise ExceptionTranslator.as_transport_error(
                exc, getattr(self.connection, "address", ""), function_name
            ) from exc

        self._advance(attempt, InvocationState.COMPLETED)
        self.info("View '%s' completed on %s", function_name, self.connection.address)
        return result

    def _validate(self, function_name: str, payload: Optional[bytes]) -> InvocationRequest:
        if not function_name:
            raise MissingParameter("function name")
        if self.connection is None:
            raise MissingParameter("connection config")
        if not self.connection.address:
            raise MissingParameter("endpoint")
        if self.identity is None:
            raise IdentityLoadError("signing identity must be loaded before invoking a view")
        return InvocationRequest(function_name=function_name, payload=payload)

    def _call(
        self,
        attempt: InvocationAttempt,
        channel: grpc.Channel,
        request: InvocationRequest,
        timeout: Optional[float],
    ) -> InvocationResult:
        self._advance(attempt, InvocationState.SENDING)
        command = self._build_command(request)
        signed = view_messages.SignedCommand(
            command=command,
            signature=self.identity.sign(command),
        )
        process_command = channel.unary_unary(view_messages.PROCESS_COMMAND_METHOD)

        deadline = timeout if timeout is not None else self.response_timeout
        self._advance(attempt, InvocationState.AWAITING_RESPONSE)
        try:
            raw_response = process_command(signed.SerializeToString(), timeout=deadline)
        except grpc.RpcError as exc:
            code = exc.code() if hasattr(exc, "code") else None
            if code == grpc.StatusCode.DEADLINE_EXCEEDED and deadline is not None:
                raise ResponseTimeout(request.function_name, deadline, cause=exc) from exc
            raise ExceptionTranslator.as_transport_error(
                exc, self.connection.address, request.function_name
            ) from exc

        return self._classify(request, command, raw_response)

    def _build_command(self, request: InvocationRequest) -> bytes:
        header = view_messages.Header(
            timestamp_ns=time.time_ns(),
            nonce=secrets.token_bytes(NONCE_SIZE),
            creator=self.identity.serialize(),
            tls_cert_hash=self.hash_provider.hash_once(self.identity.certificate_der),
        )
        command = view_messages.Command(
            header=header,
            call_view=view_messages.CallView(
                fid=request.function_name,
                input=request.payload or b"",
            ),
        )
        return command.SerializeToString()

    def _classify(self, request: InvocationRequest, command: bytes, raw_response: bytes) -> InvocationResult:
        try:
            signed = view_messages.SignedCommandResponse.FromString(raw_response)
            response = view_messages.CommandResponse.FromString(signed.response)
        except ProtobufDecodeError as exc:
            raise ExceptionTranslator.as_decode_error(exc, "malformed command response") from exc

        expected_hash = self.hash_provider.hash_once(command)
        if response.header.command_hash and response.header.command_hash != expected_hash:
            raise DecodeError("response does not answer the command that was sent")

        kind = response.WhichOneof("payload")
        if kind == "err":
            raise ApplicationError(request.function_name, response.err.message)
        if kind != "call_view_response":
            raise DecodeError("response for '{0}' carries no result".format(request.function_name))

        view_response = response.call_view_response
        result_kind = view_response.WhichOneof("result")
        if result_kind == "json":
            return ValueResult(self._results.deserialize(view_response.json))
        # An unset result is an empty byte sequence.
        return ByteSequenceResult(view_response.raw)
