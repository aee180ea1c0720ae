import logging

import numpy as np
import pytest

from fpwavelets import compute_coefficients_for_values
from fpwavelets.errors import InvalidSegmentError
from fpwavelets.methods import Daub4Method
from fpwavelets.methods.daub4 import Daub4Filter, daub4_transform, daub4_transform_inverse


class TestComputeCoefficients:

    def test_seven_sample_segment(self):
        method = Daub4Method()
        coeffs, meta = method.compute_coefficients([1, 2, 3, 4, 5, 6, 7])

        assert meta['segment_length'] == 7
        assert meta['padded_n'] == 8
        assert meta['levels'] == 2
        assert meta['status'] == 'success'
        assert meta['roundtrip_ok']
        assert meta['roundtrip_error'] < 1e-12
        assert meta['energy_ratio'] == pytest.approx(1.0)

        padded = np.array([1, 2, 3, 4, 5, 6, 7, 0], dtype=float)
        assert coeffs.shape == (8,)
        np.testing.assert_allclose(coeffs, daub4_transform(padded))
        np.testing.assert_allclose(daub4_transform_inverse(coeffs), padded, atol=1e-12)

    @pytest.mark.parametrize("n, padded_n", [(2, 4), (3, 4), (4, 8)])
    def test_short_segments(self, n, padded_n):
        coeffs, meta = Daub4Method().compute_coefficients(np.arange(1.0, n + 1))
        assert meta['padded_n'] == padded_n
        assert len(coeffs) == padded_n
        assert meta['roundtrip_ok']

    def test_single_sample_is_invalid(self):
        with pytest.raises(InvalidSegmentError) as exc:
            Daub4Method().compute_coefficients([3.0])
        assert exc.value.segment_length == 1

    def test_empty_segment_is_invalid(self):
        with pytest.raises(InvalidSegmentError):
            Daub4Method().compute_coefficients([])

    def test_self_check_can_be_disabled(self):
        _, meta = Daub4Method({'self_check': False}).compute_coefficients([1.0, 2.0, 3.0])
        assert np.isnan(meta['roundtrip_error'])
        assert meta['roundtrip_ok']

    def test_filter_mismatch_fails_self_check(self, caplog):
        # a non-orthogonal filter cannot be inverted by its transpose
        skewed = Daub4Filter(0.5, 0.9, 0.2, -0.1)
        method = Daub4Method({'filter': skewed})
        with caplog.at_level(logging.WARNING, logger="fpwavelets.methods.daub4.daub4_method"):
            _, meta = method.compute_coefficients([1.0, -2.0, 3.0, 5.0, 8.0], pattern_id=6)
        assert not meta['roundtrip_ok']
        assert "Pattern 6: inverse transform mismatch" in caplog.text

    def test_debug_table_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="fpwavelets.methods.daub4.daub4_method"):
            Daub4Method().compute_coefficients([1.0, 2.0, 3.0], pattern_id=2)
        assert "Pattern 2 coefficients" in caplog.text
        assert "reconstructed" in caplog.text

    def test_convenience_function(self):
        coeffs, meta = compute_coefficients_for_values([1.0, 2.0, 3.0, 4.0, 5.0])
        assert meta['padded_n'] == 8
        assert len(coeffs) == 8


class TestConfiguration:

    def test_default_config_is_valid(self):
        Daub4Method().validate_config()

    def test_filter_from_pywavelets_name(self):
        method = Daub4Method({'filter_name': 'db2'})
        method.validate_config()
        np.testing.assert_allclose(method.filter.lowpass, Daub4Method().filter.lowpass, atol=1e-12)

    def test_rejects_non_orthonormal_filter(self):
        with pytest.raises(ValueError):
            Daub4Method({'filter': Daub4Filter(1.0, 1.0, 1.0, 1.0)}).validate_config()

    def test_rejects_non_positive_tolerance(self):
        with pytest.raises(ValueError):
            Daub4Method({'roundtrip_tolerance': 0.0}).validate_config()

    def test_method_info(self):
        info = Daub4Method().get_method_info()
        assert info['name'] == 'Daub4Method'
        assert info['filter_name'] == 'db2'
        assert info['min_block_length'] == '4'
