"""Unit tests for gradecube.extraction.free_text: no live generation service required."""
import pytest

from gradecube.extraction.free_text import extract_parameters, normalize_magnitude
from gradecube.params.schema import NEUTRAL_PARAMETERS, RGBTriple, merge_parameters

# A reply in the format the generation prompt asks for
MODEL_REPLY = """Here are the parameters for a cinematic orange and teal look:
- contrast: 0.15
- saturation: 0.1
- temperature: 0.2
- tint: 0.05
- shadows: -0.1
- highlights: 0.1
- lift: RGB(0, -0.1, 0.1)
- gamma: RGB(0.05, 0, -0.05)
- gain: RGB(0.1, 0.05, -0.1)
"""


class TestNormalizeMagnitude:
    """normalize_magnitude() behavior."""

    @pytest.mark.parametrize("raw,expected", [
        (0.3, 0.3),
        (30, 0.3),
        (-20, -0.2),
        (-0.5, -0.5),
        (1, 1.0),
        (-1, -1.0),
        (250, 1.0),
        (-250, -1.0),
        (0, 0.0),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_magnitude(raw) == pytest.approx(expected)


class TestExtractParameters:
    """extract_parameters() behavior."""

    def test_percent_scale_example(self):
        found = extract_parameters("contrast: 30, saturation: -20")
        assert set(found) == {"contrast", "saturation"}
        assert found["contrast"] == pytest.approx(0.3)
        assert found["saturation"] == pytest.approx(-0.2)

    def test_full_model_reply(self):
        found = extract_parameters(MODEL_REPLY)
        assert found["contrast"] == pytest.approx(0.15)
        assert found["shadows"] == pytest.approx(-0.1)
        assert found["lift"] == RGBTriple(r=0.0, g=-0.1, b=0.1)
        assert found["gamma"] == RGBTriple(r=0.05, g=0.0, b=-0.05)
        assert found["gain"] == RGBTriple(r=0.1, g=0.05, b=-0.1)
        assert len(found) == 9

    def test_case_insensitive_and_singular_labels(self):
        found = extract_parameters("SHADOW +0.2 and Highlight -0.3")
        assert found == {"shadows": pytest.approx(0.2), "highlights": pytest.approx(-0.3)}

    def test_triple_without_rgb_prefix(self):
        found = extract_parameters("lift: (10, 0, -10)")
        assert found["lift"] == RGBTriple(r=0.1, g=0.0, b=-0.1)

    def test_triple_percent_channels(self):
        found = extract_parameters("gain RGB(20 5 -15)")
        assert found["gain"].as_tuple() == pytest.approx((0.2, 0.05, -0.15))

    @pytest.mark.parametrize("text", [
        "",
        "make it look like a summer afternoon",
        "contrast: high, saturation: low",
        "lift: RGB(a, b, c)",
    ])
    def test_unmatched_text_yields_empty(self, text):
        assert extract_parameters(text) == {}

    def test_non_string_never_raises(self):
        assert extract_parameters(None) == {}

    def test_missing_fields_not_zero_filled(self):
        found = extract_parameters("temperature: -0.4")
        assert list(found) == ["temperature"]

    def test_merge_onto_defaults(self):
        params = merge_parameters(NEUTRAL_PARAMETERS, extract_parameters("tint: 15 gamma: RGB(0.1, 0.1, 0.1)"))
        assert params.tint == pytest.approx(0.15)
        assert params.gamma.as_tuple() == pytest.approx((0.1, 0.1, 0.1))
        assert params.contrast == 0.0
