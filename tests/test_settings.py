import io
import math

import pytest

from sdpcore.settings import ComputeTime, Parameter, ParameterType


def _render(obj):
    buf = io.StringIO()
    obj.display(buf)
    return buf.getvalue()


def test_set_default_presets():
    param = Parameter()
    param.set_default(ParameterType.STABLE_BUT_SLOW)
    assert param.max_iteration == 1000
    assert param.gamma_star == 0.5
    param.set_default(ParameterType.UNSTABLE_BUT_FAST)
    assert param.max_iteration == 100
    assert param.beta_bar == 0.02
    param.set_default()
    assert param.max_iteration == 200
    assert param.lambda_star == 1.0e4


def test_default_construction_matches_default_preset():
    param = Parameter()
    preset = Parameter(max_iteration=1)
    preset.set_default(ParameterType.DEFAULT)
    assert param == preset


def test_read_file_takes_leading_number_of_each_line():
    text = (
        "300    unsigned int maxIteration;\n"
        "1.0E-7 double 0.0 < epsilonStar;\n"
        "\n"
        "1.0E2  double 0.0 < lambdaStar;\n"
        "2.0    double 1.0 < omegaStar;\n"
        "-1.0E5 double lowerBound;\n"
        "1.0E5  double upperBound;\n"
        "0.1    double 0.0 <= betaStar < 1.0;\n"
        "0.2    double 0.0 <= betaStar <= betaBar < 1.0;\n"
        "0.9    double 0.0 < gammaStar < 1.0;\n"
        "1.0E-7 double 0.0 < epsilonDash;\n"
    )
    param = Parameter().read_file(io.StringIO(text))
    assert param.max_iteration == 300
    assert param.epsilon_star == 1.0e-7
    assert param.lambda_star == 1.0e2
    assert param.lower_bound == -1.0e5
    assert param.beta_bar == 0.2
    assert param.epsilon_dash == 1.0e-7


def test_read_file_round_trip_through_plain_values():
    original = Parameter()
    original.set_default(ParameterType.STABLE_BUT_SLOW)
    text = "\n".join(
        repr(v) for v in (
            original.max_iteration, original.epsilon_star, original.lambda_star,
            original.omega_star, original.lower_bound, original.upper_bound,
            original.beta_star, original.beta_bar, original.gamma_star,
            original.epsilon_dash,
        )
    )
    assert Parameter().read_file(io.StringIO(text)) == original


def test_read_file_short_raises():
    with pytest.raises(ValueError):
        Parameter().read_file(io.StringIO("100\n1.0e-7\n"))


def test_read_file_bad_line_raises():
    with pytest.raises(ValueError):
        Parameter().read_file(io.StringIO("maxIteration\n"))


def test_parameter_display_format():
    out = _render(Parameter())
    lines = out.splitlines()
    assert len(lines) == 10
    assert lines[0] == "maxIteration =    200"
    assert lines[-1].startswith("epsilonDash  = ")
    assert float(lines[2].split("=")[1]) == Parameter().lambda_star


def test_parameter_display_none_writes_nothing(capsys):
    Parameter().display(None)
    assert capsys.readouterr().out == ""


def test_compute_time_display_ratios():
    com = ComputeTime(main_loop=2.0, make_b_mat=1.0)
    out = _render(com)
    assert out.startswith("\n")
    assert out.endswith("\n\n")
    assert " Make bMat time  =       1.000000,  50.000000" in out
    main = [line for line in out.splitlines() if line.startswith(" Main Loop")]
    assert main == [" Main Loop       =       2.000000,  100.000000"]


def test_compute_time_display_zero_main_loop_gives_nan():
    out = _render(ComputeTime())
    predictor = [line for line in out.splitlines() if line.startswith(" Predictor")]
    assert len(predictor) == 1
    ratio = float(predictor[0].split(",")[1])
    assert math.isnan(ratio)


def test_compute_time_row_count():
    out = _render(ComputeTime(main_loop=1.0))
    rows = [line for line in out.splitlines() if "=" in line]
    assert len(rows) == 34