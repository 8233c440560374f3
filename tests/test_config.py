"""Tests for environment-driven configuration."""
import pytest

from bezier_timing.config import TimingConfig, load_config

ENV_VARS = [
    "TIMING_DOMAIN",
    "TIMING_STRICT",
    "TIMING_EPSILON",
    "TIMING_SAMPLE_DT",
    "TIMING_MAX_SAMPLES",
    "TIMING_CORS_ORIGINS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Test defaults without any environment."""

    def test_defaults(self):
        """load_config matches the dataclass defaults."""
        cfg = load_config()
        assert cfg == TimingConfig()
        assert cfg.domain == "clamp"
        assert cfg.strict is False
        assert cfg.epsilon == 1e-6
        assert cfg.sample_dt == 0.01
        assert cfg.max_samples == 100_000
        assert cfg.cors_origins == ["*"]


class TestEnvOverrides:
    """Test TIMING_* environment overrides."""

    def test_domain(self, monkeypatch):
        """TIMING_DOMAIN selects the x-domain policy, case-insensitively."""
        monkeypatch.setenv("TIMING_DOMAIN", "Reject")
        assert load_config().domain == "reject"

    def test_unknown_domain(self, monkeypatch):
        """Unknown policies fail loudly."""
        monkeypatch.setenv("TIMING_DOMAIN", "wrap")
        with pytest.raises(ValueError):
            load_config()

    @pytest.mark.parametrize("raw,expected", [("1", True), ("true", True), ("YES", True), ("0", False), ("no", False)])
    def test_strict(self, monkeypatch, raw, expected):
        """TIMING_STRICT accepts the usual truthy spellings."""
        monkeypatch.setenv("TIMING_STRICT", raw)
        assert load_config().strict is expected

    def test_numbers(self, monkeypatch):
        """Numeric overrides are parsed as floats."""
        monkeypatch.setenv("TIMING_EPSILON", "1e-9")
        monkeypatch.setenv("TIMING_SAMPLE_DT", "0.02")
        cfg = load_config()
        assert cfg.epsilon == 1e-9
        assert cfg.sample_dt == 0.02

    def test_non_positive_dt(self, monkeypatch):
        """A zero sampling step is refused."""
        monkeypatch.setenv("TIMING_SAMPLE_DT", "0")
        with pytest.raises(ValueError):
            load_config()

    def test_cors_origins(self, monkeypatch):
        """TIMING_CORS_ORIGINS is a comma separated list."""
        monkeypatch.setenv("TIMING_CORS_ORIGINS", "http://a.test, http://b.test,")
        assert load_config().cors_origins == ["http://a.test", "http://b.test"]

    @pytest.mark.parametrize("raw", ["0", "-1e-6", "nan", "inf"])
    def test_invalid_epsilon(self, monkeypatch, raw):
        """The degenerate threshold must be a finite positive number."""
        monkeypatch.setenv("TIMING_EPSILON", raw)
        with pytest.raises(ValueError):
            load_config()

    def test_nan_dt(self, monkeypatch):
        """A NaN sampling step is refused."""
        monkeypatch.setenv("TIMING_SAMPLE_DT", "nan")
        with pytest.raises(ValueError):
            load_config()

    def test_max_samples(self, monkeypatch):
        """TIMING_MAX_SAMPLES bounds the samples per timeline."""
        monkeypatch.setenv("TIMING_MAX_SAMPLES", "500")
        assert load_config().max_samples == 500

    @pytest.mark.parametrize("raw", ["1", "0", "-10"])
    def test_max_samples_too_small(self, monkeypatch, raw):
        """A limit below two samples can't hold both ends of a timeline."""
        monkeypatch.setenv("TIMING_MAX_SAMPLES", raw)
        with pytest.raises(ValueError):
            load_config()
