#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Protobuf message classes for the signed command protocol (see view.proto).

The descriptors are assembled with ``descriptor_pb2`` in a private descriptor
pool, so no protoc step is needed and the ``protos`` package name cannot clash
with other modules registered in the default pool.
"""

from typing import Dict, Iterable, Optional, Tuple

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PROTO_PACKAGE = "protos"
SERVICE_NAME = "ViewService"
PROCESS_COMMAND_METHOD = "/{0}.{1}/ProcessCommand".format(PROTO_PACKAGE, SERVICE_NAME)

_FDP = descriptor_pb2.FieldDescriptorProto

# (name, number, type, message type name or None, oneof name or None)
_FieldSpec = Tuple[str, int, int, Optional[str], Optional[str]]

_MESSAGES: Dict[str, Iterable[_FieldSpec]] = {
    "Header": (
        ("timestamp_ns", 1, _FDP.TYPE_INT64, None, None),
        ("nonce", 2, _FDP.TYPE_BYTES, None, None),
        ("creator", 3, _FDP.TYPE_BYTES, None, None),
        ("tls_cert_hash", 4, _FDP.TYPE_BYTES, None, None),
    ),
    "CallView": (
        ("fid", 1, _FDP.TYPE_STRING, None, None),
        ("input", 2, _FDP.TYPE_BYTES, None, None),
    ),
    "Command": (
        ("header", 1, _FDP.TYPE_MESSAGE, "Header", None),
        ("call_view", 2, _FDP.TYPE_MESSAGE, "CallView", "payload"),
    ),
    "SignedCommand": (
        ("command", 1, _FDP.TYPE_BYTES, None, None),
        ("signature", 2, _FDP.TYPE_BYTES, None, None),
    ),
    "CommandResponseHeader": (
        ("timestamp_ns", 1, _FDP.TYPE_INT64, None, None),
        ("command_hash", 2, _FDP.TYPE_BYTES, None, None),
        ("creator", 3, _FDP.TYPE_BYTES, None, None),
    ),
    "Error": (
        ("message", 1, _FDP.TYPE_STRING, None, None),
        ("payload", 2, _FDP.TYPE_BYTES, None, None),
    ),
    "CallViewResponse": (
        ("raw", 1, _FDP.TYPE_BYTES, None, "result"),
        ("json", 2, _FDP.TYPE_STRING, None, "result"),
    ),
    "CommandResponse": (
        ("header", 1, _FDP.TYPE_MESSAGE, "CommandResponseHeader", None),
        ("err", 2, _FDP.TYPE_MESSAGE, "Error", "payload"),
        ("call_view_response", 3, _FDP.TYPE_MESSAGE, "CallViewResponse", "payload"),
    ),
    "SignedCommandResponse": (
        ("response", 1, _FDP.TYPE_BYTES, None, None),
        ("signature", 2, _FDP.TYPE_BYTES, None, None),
    ),
}


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="viewremote/view.proto",
        package=PROTO_PACKAGE,
        syntax="proto3",
    )
    for message_name, fields in _MESSAGES.items():
        message = file_proto.message_type.add(name=message_name)
        oneofs: Dict[str, int] = {}
        for field_name, number, field_type, type_name, oneof in fields:
            field = message.field.add(
                name=field_name,
                number=number,
                type=field_type,
                label=_FDP.LABEL_OPTIONAL,
            )
            if type_name is not None:
                field.type_name = ".{0}.{1}".format(PROTO_PACKAGE, type_name)
            if oneof is not None:
                if oneof not in oneofs:
                    oneofs[oneof] = len(message.oneof_decl)
                    message.oneof_decl.add(name=oneof)
                field.oneof_index = oneofs[oneof]

    service = file_proto.service.add(name=SERVICE_NAME)
    service.method.add(
        name="ProcessCommand",
        input_type=".{0}.SignedCommand".format(PROTO_PACKAGE),
        output_type=".{0}.SignedCommandResponse".format(PROTO_PACKAGE),
    )
    return file_proto


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file_descriptor().SerializeToString())


def _message_class(name: str):
    return message_factory.GetMessageClass(
        _POOL.FindMessageTypeByName("{0}.{1}".format(PROTO_PACKAGE, name))
    )


Header = _message_class("Header")
CallView = _message_class("CallView")
Command = _message_class("Command")
SignedCommand = _message_class("SignedCommand")
CommandResponseHeader = _message_class("CommandResponseHeader")
Error = _message_class("Error")
CallViewResponse = _message_class("CallViewResponse")
CommandResponse = _message_class("CommandResponse")
SignedCommandResponse = _message_class("SignedCommandResponse")

__all__ = [
    "PROCESS_COMMAND_METHOD",
    "Header",
    "CallView",
    "Command",
    "SignedCommand",
    "CommandResponseHeader",
    "Error",
    "CallViewResponse",
    "CommandResponse",
    "SignedCommandResponse",
]
