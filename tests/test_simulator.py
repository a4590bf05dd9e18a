import pytest

from linkdiag.diagnostics import DiagnosticEngine, RootCause
from linkdiag.faults import FaultConfiguration, FaultType
from linkdiag.rng import RandomSource
from linkdiag.simulator import LinkBaseline, LinkSimulator
from linkdiag.window import window_from


def _run(config, steps, seed=0):
    sim = LinkSimulator(config=config, rng=RandomSource(seed=seed))
    return sim, [sim.step() for _ in range(steps)]


def assert_in_range(sample):
    assert -5.0 <= sample.snr_db <= 40.0
    assert 1e-9 <= sample.ber <= 0.5
    assert sample.latency_ms >= 1.0
    assert isinstance(sample.retries, int)
    assert sample.retries >= 0


def test_nominal_link_reports_no_faults():
    sim, samples = _run(FaultConfiguration(), 300)
    assert [s.t for s in samples] == list(range(1, 301))
    assert sim.t == 300
    for s in samples:
        assert s.active_faults == ()
        assert s.retries == 0
        assert_in_range(s)


def test_nominal_window_is_diagnosed_healthy():
    _, samples = _run(FaultConfiguration(), 200, seed=3)
    engine = DiagnosticEngine()
    healthy = 0
    for end in range(20, len(samples) + 1):
        diag = engine.diagnose(window_from(samples[:end]))
        if diag.primary_cause is RootCause.HEALTHY:
            healthy += 1
    assert healthy / (len(samples) - 19) > 0.95


def test_outputs_are_clipped_under_extreme_faults():
    cfg = FaultConfiguration(
        noise_spike_level=3.0, jammer_level=3.0, sync_loss_prob=0.5, congestion_level=3.0, fading_severity=3.0
    )
    _, samples = _run(cfg, 500, seed=11)
    for s in samples:
        assert_in_range(s)


def test_negative_knobs_do_not_raise():
    cfg = FaultConfiguration(noise_spike_level=-2.0, jammer_level=-1.0, congestion_level=-3.0, fading_severity=-1.0)
    _, samples = _run(cfg, 100)
    for s in samples:
        assert s.active_faults == ()
        assert_in_range(s)


def test_sync_outage_overrides_other_faults():
    cfg = FaultConfiguration(
        noise_spike_level=2.0, jammer_level=2.0, sync_loss_prob=1.0, congestion_level=2.0, fading_severity=2.0
    )
    _, samples = _run(cfg, 200, seed=5)
    for s in samples:
        assert 0.1 <= s.ber <= 0.9
        assert s.snr_db > 15.0
        assert FaultType.SYNC_LOSS in s.active_faults
        assert FaultType.CONGESTION not in s.active_faults
        assert FaultType.FADING not in s.active_faults
        assert s.retries >= 5


def test_configuration_applies_from_next_step():
    sim = LinkSimulator(rng=RandomSource(seed=2))
    assert sim.step().active_faults == ()
    sim.set_fault_configuration(FaultConfiguration(fading_severity=1.0))
    assert sim.step().active_faults == (FaultType.FADING,)
    sim.set_fault_configuration(FaultConfiguration())
    assert sim.step().active_faults == ()


def test_fading_only_degrades_snr():
    _, samples = _run(FaultConfiguration(fading_severity=1.0), 300, seed=8)
    # baseline 25 dB with 0.3 dB jitter, fading takes at least 5 dB off
    assert all(s.snr_db < 22.0 for s in samples)


def test_custom_baseline():
    sim = LinkSimulator(rng=RandomSource(seed=1), baseline=LinkBaseline(snr_db=35.0, latency_ms=50.0))
    sample = sim.step()
    assert 30.0 < sample.snr_db <= 40.0
    assert 40.0 < sample.latency_ms < 60.0


def test_jammer_scenario():
    _, samples = _run(FaultConfiguration(jammer_level=2.0), 20, seed=0)
    assert all(FaultType.WIDEBAND_JAMMER in s.active_faults for s in samples)
    assert all(s.retries >= 10 for s in samples)

    window = window_from(samples)
    assert window.snr_mean < 12.0

    diag = DiagnosticEngine().diagnose(window)
    jammer = [ev for ev in diag.contributing_rules if ev.root_cause is RootCause.WIDEBAND_JAMMER]
    assert len(jammer) == 1
    assert jammer[0].score == pytest.approx(1.0)
    probs = dict(diag.ranked_causes)
    assert probs[RootCause.WIDEBAND_JAMMER] == pytest.approx(max(probs.values()))
    assert diag.primary_cause in (RootCause.NOISE_SPIKE, RootCause.WIDEBAND_JAMMER)


def test_sample_to_dict_uses_string_tags():
    sim = LinkSimulator(config=FaultConfiguration(congestion_level=1.0), rng=RandomSource(seed=4))
    payload = sim.step().to_dict()
    assert payload["t"] == 1
    assert payload["active_faults"] == ["congestion"]
