"""Pytest configuration and shared fixtures for pypan tests.

The fake engine below stands in for the PAN shared library. It exposes the
same four entry points and fills the output slots through ctypes pointers, so
the bindings, the session and the variable reader run their real code paths.
"""

import re
import sys
from ctypes import POINTER, c_double
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional, Tuple

import numpy as np
import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pypan.config import PanConfig  # noqa: E402
from pypan.core.platform import ResolvedLibrary  # noqa: E402
from pypan.engine.loader import LibraryLoader  # noqa: E402
from pypan.engine.session import EngineSession  # noqa: E402

_MANIFEST = re.compile(r'mem=\[(.*)\]')
_OPTION = re.compile(r'^[A-Za-z_][\w.]*=\S+$')


class FakePanEngine:
    """In-process engine exposing the PAN entry points.

    Commands follow ``<name> <type> <k>=<v> ... [mem=[...]]``. Supported
    types: tran (needs ``tstop``), shooting (``period``), envelope (``tstop``
    and ``period``), dc, pz and alter. ``alter`` stores ``param``/``value``;
    a later ``dc`` with a manifest publishes every altered parameter named in
    the manifest as ``<name>.<param>``.
    """

    REQUIRED = {
        "tran": ["tstop"],
        "shooting": ["period"],
        "envelope": ["tstop", "period"],
        "dc": [],
        "pz": [],
        "alter": ["param", "value"],
    }

    def __init__(self) -> None:
        self.store: Dict[str, Tuple[np.ndarray, Optional[np.ndarray], int, int]] = {}
        self.params: Dict[str, float] = {}
        self.commands: List[str] = []
        self.failing: set = set()
        self.argv: Optional[List[str]] = None
        self.init_status = 1
        self.netlist_status = 0
        self.init_calls = 0
        self.get_calls = 0

    def define(
        self,
        name: str,
        values,
        imaginary=None,
        rows: Optional[int] = None,
        cols: Optional[int] = None,
    ) -> None:
        real = np.ascontiguousarray(values, dtype=np.float64)
        imag = (
            None
            if imaginary is None
            else np.ascontiguousarray(imaginary, dtype=np.float64)
        )
        if rows is None and cols is None:
            rows, cols = len(real), 1
        self.store[name] = (real, imag, rows, cols)

    # Entry points

    def InitialiseGlobals(self) -> int:  # noqa: N802
        self.init_calls += 1
        return self.init_status

    def JuliaPanInit(self, argc, argv) -> int:  # noqa: N802
        self.argv = [argv[i].decode("utf-8") for i in range(argc)]
        return self.netlist_status

    def PanJuliaExecuteCommand(self, command: bytes) -> int:  # noqa: N802
        text = command.decode("utf-8")
        self.commands.append(text)
        return 1 if self._execute(text) else 0

    def PanJuliaGet(self, name, real_out, imag_out, rows_out, cols_out) -> int:  # noqa: N802
        self.get_calls += 1
        key = name.decode("utf-8")
        if key not in self.store:
            return 0
        real, imag, rows, cols = self.store[key]
        real_out[0] = real.ctypes.data_as(POINTER(c_double))
        if imag is not None:
            imag_out[0] = imag.ctypes.data_as(POINTER(c_double))
        rows_out[0] = rows
        cols_out[0] = cols
        return 1

    # Command interpreter

    def _execute(self, text: str) -> bool:
        manifest: List[str] = []
        match = _MANIFEST.search(text)
        if match:
            inner = match.group(1)
            manifest = re.findall(r'"([^"]*)"', inner)
            text = text[: match.start()] + text[match.end():]

        tokens = text.split()
        if len(tokens) < 2:
            return False
        name, analysis_type, options = tokens[0], tokens[1], tokens[2:]
        if name in self.failing or analysis_type not in self.REQUIRED:
            return False
        if not all(_OPTION.match(option) for option in options):
            return False
        values = dict(option.split("=", 1) for option in options)
        if any(key not in values for key in self.REQUIRED[analysis_type]):
            return False

        if analysis_type == "alter":
            self.params[values["param"].strip('"')] = float(values["value"])
        elif analysis_type == "dc":
            for var in manifest:
                if var in self.params:
                    self.define(f"{name}.{var}", [self.params[var]])
        return True


class OpenerRegistry:
    """Mock dynamic loader recording every open request."""

    def __init__(self, engine: FakePanEngine, engine_path: str) -> None:
        self.engine = engine
        self.engine_path = engine_path
        self.calls: List[Tuple[str, int]] = []

    def __call__(self, name: str, mode: int):
        self.calls.append((name, mode))
        if name == self.engine_path:
            return self.engine
        return SimpleNamespace(_name=name)

    @property
    def opened(self) -> List[str]:
        return [name for name, _ in self.calls]


def fake_resolver(lib_name: str) -> ResolvedLibrary:
    return ResolvedLibrary(logical_name=lib_name, loader_name=f"lib{lib_name}.so")


@pytest.fixture(autouse=True)
def isolated_process_tables(monkeypatch):
    """Give each test empty process-wide library and failed-init tables."""
    monkeypatch.setattr("pypan.engine.loader._process_libraries", {})
    monkeypatch.setattr("pypan.engine.loader._failed_global_init", set())


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Return a temporary directory for test output."""
    return tmp_path


@pytest.fixture
def fake_engine() -> FakePanEngine:
    return FakePanEngine()


@pytest.fixture
def engine_file(temp_dir: Path) -> Path:
    """A file standing in for the engine shared library."""
    path = temp_dir / "libpan.so"
    path.write_bytes(b"")
    return path


@pytest.fixture
def sample_netlist(temp_dir: Path) -> Path:
    """Return path to a sample netlist file."""
    netlist = temp_dir / "rc.pan"
    netlist.write_text(
        """; Simple RC circuit
ground electrical gnd
V1 in gnd vsource vdc=1
R1 in out resistor r=1k
C1 out gnd capacitor c=1u
"""
    )
    return netlist


@pytest.fixture
def config(engine_file: Path) -> PanConfig:
    return PanConfig(engine_library=str(engine_file))


@pytest.fixture
def registry(fake_engine: FakePanEngine, engine_file: Path) -> OpenerRegistry:
    return OpenerRegistry(fake_engine, str(engine_file))


@pytest.fixture
def resolver():
    """Resolver mapping a logical name to lib<name>.so."""
    return fake_resolver


@pytest.fixture
def loader(config: PanConfig, registry: OpenerRegistry) -> LibraryLoader:
    return LibraryLoader(config, opener=registry, resolver=fake_resolver)


@pytest.fixture
def session(
    config: PanConfig, loader: LibraryLoader, sample_netlist: Path
) -> EngineSession:
    """An engine session initialized with the sample netlist."""
    return EngineSession(config=config, loader=loader).initialize(sample_netlist)


@pytest.fixture
def transient_engine(fake_engine: FakePanEngine) -> FakePanEngine:
    """Engine pre-populated with the results of transient analysis ``Tr``."""
    fake_engine.define("Tr.time", [0, 0.1, 0.2])
    fake_engine.define("Tr.x", [0, 1, 2])
    return fake_engine


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "requires_pan: mark test as requiring the PAN engine library"
    )
