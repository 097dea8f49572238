from __future__ import annotations

import logging
from typing import Iterator

import pytest

from pinbump.utils import console as console_module


@pytest.fixture(autouse=True)
def reset_pinbump_output() -> Iterator[None]:
    """Undo logging and console state left behind by CLI invocations.

    ``setup_logging`` binds a handler to the stream that was current at the
    time (CliRunner's, for instance) and stops propagation, which would hide
    records from ``caplog`` in later tests.
    """
    yield
    root = logging.getLogger("pinbump")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True
    console_module.reconfigure_console()
