import numpy as np
import pytest

from glint_matrix import (
    POL_P,
    POL_S,
    GlintTransferMatrix,
    Layer,
    ReflectionTransmission,
    as_layers,
    compute_reflection_transmission,
    parse_polarization,
)
from optical_models import Konstant


def _fresnel_s(n1, n2, theta_deg):
    c1 = np.cos(np.radians(theta_deg))
    c2 = np.sqrt(1 - (n1 / n2 * np.sin(np.radians(theta_deg))) ** 2 + 0j)
    return (n1 * c1 - n2 * c2) / (n1 * c1 + n2 * c2)


@pytest.fixture
def spr_stack(gold):
    return [Layer(gold, 45e-9, name="Au")]


class TestPolarization:

    @pytest.mark.parametrize("value, expected", [
        ("s", POL_S), ("S", POL_S), ("p", POL_P), ("TM", POL_P),
        (POL_S, POL_S), (POL_P, POL_P),
    ])
    def test_accepted(self, value, expected):
        assert parse_polarization(value) == expected

    @pytest.mark.parametrize("value", ["x", 2, -1, True, None])
    def test_rejected(self, value):
        with pytest.raises(ValueError):
            parse_polarization(value)


class TestLayer:

    def test_tuple_normalised(self, gold):
        (layer,) = as_layers([(gold, 45e-9)])
        assert isinstance(layer, Layer)
        assert layer.thickness_m == 45e-9
        assert layer.material is gold

    @pytest.mark.parametrize("thickness", [-1e-9, np.nan, np.inf])
    def test_invalid_thickness(self, gold, thickness):
        with pytest.raises(ValueError):
            Layer(gold, thickness)

    def test_material_type_checked(self):
        with pytest.raises(TypeError):
            Layer(1.5, 10e-9)

    def test_frozen(self, gold):
        layer = Layer(gold, 10e-9)
        with pytest.raises(AttributeError):
            layer.thickness_m = 20e-9


class TestBareInterface:

    def test_normal_incidence(self, air, glass):
        for pol in ("s", "p"):
            res = compute_reflection_transmission(550e-9, air, [], glass, 0.0, pol)
            assert isinstance(res, ReflectionTransmission)
            assert res.reflectance == pytest.approx(0.04, abs=1e-12)
            assert res.transmittance == pytest.approx(0.96, abs=1e-12)
            assert res.theta_out_deg == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.parametrize("theta", [10.0, 30.0, 60.0])
    def test_s_matches_fresnel(self, air, glass, theta):
        res = compute_reflection_transmission(550e-9, air, [], glass, theta, POL_S)
        assert res.reflectance == pytest.approx(abs(_fresnel_s(1.0, 1.5, theta)) ** 2,
                                                abs=1e-12)
        assert res.reflectance + res.transmittance == pytest.approx(1.0, abs=1e-12)

    def test_p_energy_conserved(self, air, glass):
        res = compute_reflection_transmission(550e-9, air, [], glass, 40.0, POL_P)
        assert res.reflectance + res.transmittance == pytest.approx(1.0, abs=1e-12)

    def test_brewster_angle(self, air, glass):
        brewster = np.degrees(np.arctan(1.5))
        res = compute_reflection_transmission(550e-9, air, [], glass, brewster, "p")
        assert res.reflectance == pytest.approx(0.0, abs=1e-12)

    def test_refraction_angle(self, air, glass):
        res = compute_reflection_transmission(550e-9, air, [], glass, 30.0, "s")
        assert res.theta_out_deg == pytest.approx(np.degrees(np.arcsin(0.5 / 1.5)))

    def test_total_internal_reflection(self, glass, water):
        res = compute_reflection_transmission(633e-9, glass, [], water, 70.0, "s")
        assert res.reflectance == pytest.approx(1.0, abs=1e-12)
        assert res.transmittance == 0.0
        assert res.theta_out_deg == pytest.approx(90.0)

    def test_grazing_incidence(self, air, glass):
        s = compute_reflection_transmission(550e-9, air, [], glass, 90.0, "s")
        assert s.reflectance == pytest.approx(1.0, abs=1e-12)
        assert s.transmittance == 0.0

        # p-admittance n²/kz is undefined for kz = 0
        p = compute_reflection_transmission(550e-9, air, [], glass, 90.0, "p")
        assert p.reflectance == 0.0
        assert p.transmittance == 0.0

    def test_vanishing_denominator(self):
        # Index-matched grazing incidence: η_in = η_out = 0, so D = 0
        matched = Konstant(1.5)
        res = compute_reflection_transmission(550e-9, matched, [], matched, 90.0, "s")
        assert res.reflectance == 0.0
        assert res.transmittance == 0.0

    def test_vanishing_layer_admittance(self):
        # Film index equals the Snell invariant: kz = η = 0 inside the film
        prism, film, exit_medium = Konstant(1.5), Konstant(1.5), Konstant(2.0)
        bare = compute_reflection_transmission(550e-9, prism, [], exit_medium,
                                               90.0, "s")
        coated = compute_reflection_transmission(550e-9, prism, [(film, 50e-9)],
                                                 exit_medium, 90.0, "s")
        assert np.isfinite(coated.reflectance)
        assert coated.reflectance == pytest.approx(1.0, abs=1e-12)
        assert coated.reflectance == pytest.approx(bare.reflectance, abs=1e-12)
        assert coated.transmittance == 0.0

    def test_interior_p_layer_degenerate(self):
        # Film index equals N_in·sin θ, so η_p = N²/kz is undefined in the film
        prism, exit_medium = Konstant(2.0), Konstant(2.0)
        film = Konstant(2.0 * np.sin(np.radians(40.0)))
        bare = compute_reflection_transmission(550e-9, prism, [], exit_medium,
                                               40.0, "p")
        assert bare.transmittance == pytest.approx(1.0, abs=1e-12)
        res = compute_reflection_transmission(550e-9, prism, [(film, 50e-9)],
                                              exit_medium, 40.0, "p")
        assert res.reflectance == 0.0
        assert res.transmittance == 0.0


class TestThinFilms:

    def test_quarter_wave_antireflection(self, air):
        wl = 600e-9
        n_sub = 1.5
        n_film = np.sqrt(n_sub)
        coat = Layer(Konstant(n_film), wl / (4.0 * n_film))
        res = compute_reflection_transmission(wl, air, [coat], Konstant(n_sub), 0.0, "s")
        assert res.reflectance == pytest.approx(0.0, abs=1e-12)
        assert res.transmittance == pytest.approx(1.0, abs=1e-12)

    def test_half_wave_layer_is_absent(self, air, glass):
        wl = 600e-9
        film = Layer(Konstant(2.1), wl / (2.0 * 2.1))
        bare = compute_reflection_transmission(wl, air, [], glass, 0.0, "s")
        coated = compute_reflection_transmission(wl, air, [film], glass, 0.0, "s")
        assert coated.reflectance == pytest.approx(bare.reflectance, abs=1e-12)

    def test_zero_thickness_layer_is_absent(self, air, glass, gold):
        bare = compute_reflection_transmission(633e-9, air, [], glass, 35.0, "p")
        coated = compute_reflection_transmission(633e-9, air, [(gold, 0.0)], glass,
                                                 35.0, "p")
        assert coated.reflectance == pytest.approx(bare.reflectance, abs=1e-12)

    def test_layer_order_matters_for_absorbing_stack(self, sf10, water, gold):
        dielectric = Konstant(2.0)
        a = compute_reflection_transmission(
            660e-9, sf10, [(gold, 45e-9), (dielectric, 80e-9)], water, 55.0, "p")
        b = compute_reflection_transmission(
            660e-9, sf10, [(dielectric, 80e-9), (gold, 45e-9)], water, 55.0, "p")
        assert a.reflectance != pytest.approx(b.reflectance, abs=1e-6)

    def test_spr_sweep_finite(self, sf10, spr_stack, water):
        for angle in np.arange(400, 851) / 10.0:
            for pol in (POL_S, POL_P):
                res = compute_reflection_transmission(
                    660e-9, sf10, spr_stack, water, angle, pol)
                assert np.isfinite(res.reflectance)
                assert np.isfinite(res.transmittance)
                assert -1e-6 <= res.reflectance <= 10.0

    def test_spr_dip_in_p_only(self, sf10, spr_stack, water):
        angles = np.arange(400, 851) / 10.0
        rp = np.array([compute_reflection_transmission(
            660e-9, sf10, spr_stack, water, a, "p").reflectance for a in angles])
        rs = np.array([compute_reflection_transmission(
            660e-9, sf10, spr_stack, water, a, "s").reflectance for a in angles])
        i_min = int(np.argmin(rp))
        assert 50.0 < angles[i_min] < 75.0
        assert rp[i_min] < 0.3
        assert rs[i_min] > 0.7

    def test_invalid_wavelength(self, sf10, spr_stack, water):
        with pytest.raises(ValueError):
            compute_reflection_transmission(0.0, sf10, spr_stack, water, 60.0, "p")


class TestGlintTransferMatrix:

    def test_grid_equals_scalar_solver(self, sf10, spr_stack, water):
        wavls = np.array([600e-9, 660e-9, 750e-9])
        angles = np.array([45.0, 55.0, 62.5, 70.0])
        res = GlintTransferMatrix(sf10, spr_stack, water, wavls, angles).compute_RT('u')

        for a, angle in enumerate(angles):
            for w, wl in enumerate(wavls):
                for pol, key in ((POL_S, 's'), (POL_P, 'p')):
                    point = compute_reflection_transmission(
                        wl, sf10, spr_stack, water, angle, pol)
                    assert res['R' + key][a, w] == pytest.approx(
                        point.reflectance, rel=1e-9, abs=1e-14)
                    assert res['T' + key][a, w] == pytest.approx(
                        point.transmittance, rel=1e-9, abs=1e-14)

        np.testing.assert_allclose(res['Ru'], (res['Rs'] + res['Rp']) / 2.0)
        np.testing.assert_allclose(res['Tu'], (res['Ts'] + res['Tp']) / 2.0)

    def test_single_angle_squeezed(self, sf10, spr_stack, water):
        wavls = np.linspace(550e-9, 800e-9, 11)
        res = GlintTransferMatrix(sf10, spr_stack, water, wavls, 60.0).compute_RT('p')
        assert set(res) == {'Rp', 'Tp'}
        assert res['Rp'].shape == (11,)

    def test_mode_s_only(self, sf10, spr_stack, water):
        res = GlintTransferMatrix(sf10, spr_stack, water, 660e-9,
                                  [50.0, 60.0]).compute_RT('s')
        assert set(res) == {'Rs', 'Ts'}
        assert res['Rs'].shape == (2, 1)

    def test_bad_mode(self, sf10, spr_stack, water):
        solver = GlintTransferMatrix(sf10, spr_stack, water, 660e-9, 60.0)
        with pytest.raises(ValueError):
            solver.compute_RT('x')

    def test_no_layers(self, air, glass):
        res = GlintTransferMatrix(air, [], glass, [500e-9, 600e-9], 0.0).compute_RT()
        np.testing.assert_allclose(res['Ru'], [0.04, 0.04], atol=1e-12)
