import json

import pytest

from linkdiag.diagnostics import RootCause
from linkdiag.faults import FaultConfiguration
from linkdiag.monitor import LinkMonitor
from linkdiag.rng import RandomSource
from linkdiag.scenarios import SCENARIOS, get_scenario
from linkdiag.simulator import LinkSimulator
from linkdiag.utils import RunSummary


def test_expected_cause_is_an_injected_fault():
    for name, scenario in SCENARIOS.items():
        cfg = scenario["config"]
        assert isinstance(cfg, FaultConfiguration), name
        if cfg.is_nominal():
            assert scenario["expected_cause"] is RootCause.HEALTHY
        else:
            assert scenario["expected_cause"].value in {f.value for f in cfg.active_types()}


def test_unknown_scenario():
    with pytest.raises(KeyError):
        get_scenario("solar_flare")


def test_run_summary_json():
    scenario = get_scenario("fading")
    mon = LinkMonitor(simulator=LinkSimulator(config=scenario["config"], rng=RandomSource(seed=4)))
    mon.run(30)
    summary = RunSummary.from_monitor(mon, scenario="fading", seed=4, expected_cause="fading")
    payload = json.loads(summary.to_json())
    assert payload["scenario"] == "fading"
    assert payload["steps"] == 30
    assert payload["window_size"] == 20
    assert payload["config"]["fading_severity"] == 1.0
    assert sum(payload["cause_counts"].values()) == 30
    assert payload["final"]["primary_cause"] in payload["cause_counts"]
    assert 0.0 <= payload["agreement"] <= 1.0


def test_run_summary_without_records():
    summary = RunSummary.from_monitor(LinkMonitor())
    payload = json.loads(summary.to_json())
    assert payload["final"] is None
    assert payload["steps"] == 0
