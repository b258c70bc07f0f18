#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from .cli import main

main()
