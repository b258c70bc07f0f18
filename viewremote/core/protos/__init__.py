#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Wire messages of the signed command protocol.
"""

from . import view_messages

__all__ = ["view_messages"]
