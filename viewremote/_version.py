#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Single source of truth for the viewremote package version.
"""

__version__ = "0.3.0"
