"""Unit tests for ParameterSweep and the sweep value helpers."""

import numpy as np
import pytest

from pypan.analysis.builder import AnalysisBuilder
from pypan.analysis.sweep import ParameterSweep, sweep_lin, sweep_log
from pypan.exceptions import AnalysisFailedError


class TestSweepValues:
    def test_sweep_lin(self):
        np.testing.assert_allclose(sweep_lin(0, 1, 5), [0.0, 0.25, 0.5, 0.75, 1.0])

    def test_sweep_lin_single_point(self):
        assert sweep_lin(3, 7, 1).tolist() == [3.0]

    def test_sweep_log(self):
        np.testing.assert_allclose(sweep_log(1, 1000, 4), [1, 10, 100, 1000])

    @pytest.mark.parametrize("start,stop", [(0, 10), (-1, 10), (1, -10)])
    def test_sweep_log_requires_positive_bounds(self, start, stop):
        with pytest.raises(ValueError, match="positive"):
            sweep_log(start, stop, 3)

    def test_needs_points(self):
        with pytest.raises(ValueError):
            sweep_lin(0, 1, 0)


class TestParameterSweep:
    @pytest.fixture
    def sweep(self, session):
        return ParameterSweep(AnalysisBuilder(session))

    def test_dc_sweep(self, sweep, fake_engine):
        results = sweep.run("Al", "vdd", [1.0, 2.0, 3.0], "dc", "Op", ["vdd"])

        assert [value for value, _ in results] == [1.0, 2.0, 3.0]
        assert [result["vdd"][0] for _, result in results] == [1.0, 2.0, 3.0]
        assert fake_engine.commands[:2] == [
            'Al alter param="vdd" value=1.0',
            'Op dc mem=["vdd"]',
        ]
        assert len(fake_engine.commands) == 6

    def test_positional_analysis_arguments(self, sweep, fake_engine):
        fake_engine.define("Tr.x", [0.0, 1.0])

        results = sweep.run("Al", "R1", [1e3], "transient", "Tr", ["x"], "1m", uic=1)

        assert fake_engine.commands[-1] == 'Tr tran tstop=1m mem=["x"] uic=1'
        assert results[0][1].shape == (2, 1)

    def test_iterate_is_lazy(self, sweep, fake_engine):
        iterator = sweep.iterate("Al", "vdd", [1.0, 2.0], "dc", "Op", ["vdd"])
        assert fake_engine.commands == []

        value, _ = next(iterator)

        assert value == 1.0
        assert len(fake_engine.commands) == 2

    def test_failed_alteration_stops_sweep(self, sweep, fake_engine):
        fake_engine.failing.add("Al")

        with pytest.raises(AnalysisFailedError, match="alter analysis Al failed"):
            sweep.run("Al", "vdd", [1.0, 2.0], "dc", "Op", ["vdd"])

        assert len(fake_engine.commands) == 1

    def test_unknown_analysis(self, sweep):
        with pytest.raises(ValueError, match="Cannot sweep"):
            sweep.run("Al", "vdd", [1.0], "alter", "Op", [])
