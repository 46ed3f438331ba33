from __future__ import annotations

import logging

from tagclear.core.log import resolve_level


def test_known_level_names():
    assert resolve_level("DEBUG") == logging.DEBUG
    assert resolve_level(" warning ") == logging.WARNING


def test_unknown_or_empty_level_falls_back_to_info():
    assert resolve_level("verbose") == logging.INFO
    assert resolve_level("") == logging.INFO
    assert resolve_level(None) == logging.INFO
