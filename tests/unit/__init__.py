# SPDX-License-Identifier: Apache-2.0
"""
tests.unit
==========

Fast, deterministic unit tests for the value model, comparator, codec and
ambient helpers. Shared fixtures live in tests/conftest.py.
"""
