#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
    tests.test_db
    ~~~~~~~~~~~~~

    Engine configuration bounds every wait on the store.

    :copyright: (c) 2025 by Authors.
    :license: see LICENSE for more details.
"""

from sqlalchemy.pool import StaticPool
from circulate.core.db import engine_options

PG_URI = "postgresql+psycopg2://circulate:secret@db:5432/circulate"


def test_postgres_waits_are_bounded():
    options = engine_options(PG_URI, timeout=10)
    assert options["pool_timeout"] == 10
    assert options["connect_args"] == {
        "connect_timeout": 10,
        "options": "-c statement_timeout=10000 -c lock_timeout=10000",
    }


def test_postgres_subsecond_timeout_still_connects():
    options = engine_options(PG_URI, timeout=0.5)
    assert options["connect_args"]["connect_timeout"] == 1
    assert options["connect_args"]["options"] == "-c statement_timeout=500 -c lock_timeout=500"


def test_sqlite_gets_busy_timeout():
    options = engine_options("sqlite:////tmp/circulate.db", timeout=5)
    assert options["connect_args"] == {"check_same_thread": False, "timeout": 5}
    assert "poolclass" not in options
    assert engine_options("sqlite:///:memory:")["poolclass"] is StaticPool
