#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for the signed command wire messages.
"""

import re
from pathlib import Path

from google.protobuf.descriptor import FieldDescriptor

from viewremote.core.protos import view_messages


def test_method_path_targets_view_service():
    assert view_messages.PROCESS_COMMAND_METHOD == "/protos.ViewService/ProcessCommand"


def test_command_payload_oneof_and_bytes_survive_the_wire():
    command = view_messages.Command(
        header=view_messages.Header(timestamp_ns=7, nonce=b"n" * 32, creator=b"cert"),
        call_view=view_messages.CallView(fid="init", input=b"\x00\x01"),
    )

    parsed = view_messages.Command.FromString(command.SerializeToString())

    assert parsed.WhichOneof("payload") == "call_view"
    assert parsed.call_view.fid == "init"
    assert parsed.call_view.input == b"\x00\x01"
    assert parsed.header.timestamp_ns == 7


def test_response_variants_are_mutually_exclusive():
    response = view_messages.CommandResponse()
    response.call_view_response.raw = b"ok"
    response.err.message = "failed"

    assert response.WhichOneof("payload") == "err"

    view_response = view_messages.CallViewResponse(raw=b"ok")
    view_response.json = "1"
    assert view_response.WhichOneof("result") == "json"


PROTO_PATH = Path(view_messages.__file__).with_name("view.proto")

_SCALAR_TYPES = {
    "int64": FieldDescriptor.TYPE_INT64,
    "bytes": FieldDescriptor.TYPE_BYTES,
    "string": FieldDescriptor.TYPE_STRING,
}

_BLOCK = re.compile(r"^(message|oneof|service)\s+(\w+)\s*\{$")
_FIELD = re.compile(r"^(\w+)\s+(\w+)\s*=\s*(\d+);$")
_RPC = re.compile(r"^rpc\s+(\w+)\s*\((\w+)\)\s*returns\s*\((\w+)\);$")


def _parse_proto(text):
    """
    Read the subset of proto3 used by view.proto.

    Returns ``(messages, methods)``: ``messages`` maps a message name to a set of
    ``(field, number, type, message type or None, oneof or None)`` and
    ``methods`` maps ``Service.Method`` to ``(input, output)``.
    """
    messages, methods = {}, {}
    scopes = []
    for raw_line in text.splitlines():
        line = raw_line.split("//", 1)[0].strip()
        if not line or line.startswith(("syntax", "package")):
            continue
        block = _BLOCK.match(line)
        if block:
            scopes.append(block.groups())
            if block.group(1) == "message":
                messages[block.group(2)] = set()
            continue
        if line == "}":
            scopes.pop()
            continue
        rpc = _RPC.match(line)
        if rpc:
            methods["{0}.{1}".format(scopes[-1][1], rpc.group(1))] = (rpc.group(2), rpc.group(3))
            continue
        field = _FIELD.match(line)
        assert field, "unexpected line in view.proto: {0!r}".format(raw_line)
        type_name, name, number = field.groups()
        message = next(scope[1] for scope in reversed(scopes) if scope[0] == "message")
        oneof = scopes[-1][1] if scopes[-1][0] == "oneof" else None
        if type_name in _SCALAR_TYPES:
            entry = (name, int(number), _SCALAR_TYPES[type_name], None, oneof)
        else:
            entry = (name, int(number), FieldDescriptor.TYPE_MESSAGE, type_name, oneof)
        messages[message].add(entry)
    assert not scopes, "unbalanced braces in view.proto"
    return messages, methods


def _describe(message_descriptor):
    fields = set()
    for field in message_descriptor.fields:
        fields.add((
            field.name,
            field.number,
            field.type,
            field.message_type.name if field.message_type is not None else None,
            field.containing_oneof.name if field.containing_oneof is not None else None,
        ))
    return fields


def test_runtime_descriptors_match_view_proto():
    messages, methods = _parse_proto(PROTO_PATH.read_text(encoding="utf-8"))
    file_descriptor = view_messages.Command.DESCRIPTOR.file

    assert file_descriptor.package == "protos"
    assert set(file_descriptor.message_types_by_name) == set(messages)
    for name, fields in messages.items():
        assert _describe(file_descriptor.message_types_by_name[name]) == fields, name

    runtime_methods = {
        "{0}.{1}".format(service.name, method.name): (method.input_type.name, method.output_type.name)
        for service in file_descriptor.services_by_name.values()
        for method in service.methods
    }
    assert runtime_methods == methods
    assert view_messages.PROCESS_COMMAND_METHOD == "/protos.{0}".format(
        "/".join(next(iter(methods)).split("."))
    )
