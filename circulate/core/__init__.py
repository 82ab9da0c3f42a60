#!/usr/bin/env python

"""
    Core module for Circulate: storage, identity, catalog and lending

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""
