"""Solver parameters and the per-phase timing record."""

from __future__ import annotations

import enum
import math
import re
import sys
from dataclasses import dataclass
from typing import IO, Iterator, Optional, TextIO

_STDOUT = object()

_INT_PREFIX = re.compile(r"[+-]?\d+")
_FLOAT_PREFIX = re.compile(
    r"[+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)",
    re.IGNORECASE,
)


def _resolve_output(fpout: object) -> Optional[TextIO]:
    if fpout is _STDOUT:
        return sys.stdout
    return fpout  # type: ignore[return-value]


def _ratio(value: float, total: float) -> float:
    if total == 0.0:
        if value == 0.0 or math.isnan(value):
            return math.nan
        return math.copysign(math.inf, value)
    return value / total * 100.0


@dataclass
class ComputeTime:
    """Accumulated seconds spent in each part of the solver."""

    predictor: float = 0.0
    corrector: float = 0.0
    step_predictor: float = 0.0
    step_corrector: float = 0.0
    x_mat_time: float = 0.0
    z_mat_time: float = 0.0
    inv_z_mat_time: float = 0.0
    x_mat_z_mat_time: float = 0.0
    eig_x_mat_time: float = 0.0
    eig_z_mat_time: float = 0.0
    eig_x_mat_z_mat_time: float = 0.0
    make_r_mat: float = 0.0
    make_b_mat: float = 0.0
    b_diag: float = 0.0
    b_f1: float = 0.0
    b_f2: float = 0.0
    b_f3: float = 0.0
    b_pre: float = 0.0
    make_g_vec_mul: float = 0.0
    make_g_vec: float = 0.0
    cholesky_b_mat: float = 0.0
    solve: float = 0.0
    sum_dz: float = 0.0
    make_dx: float = 0.0
    symmetrise_dx: float = 0.0
    make_dx_dz: float = 0.0
    update_res: float = 0.0
    main_loop: float = 0.0
    file_read: float = 0.0
    file_check: float = 0.0
    file_change: float = 0.0
    total_time: float = 0.0

    def _rows(self) -> Iterator[tuple[str, float]]:
        yield " Predictor time  ", self.predictor
        yield " Corrector time  ", self.corrector
        yield " Make bMat time  ", self.make_b_mat
        yield " Make bDia time  ", self.b_diag
        yield " Make bF1  time  ", self.b_f1
        yield " Make bF2  time  ", self.b_f2
        yield " Make bF3  time  ", self.b_f3
        yield " Make bPRE time  ", self.b_pre
        yield " Make rMat time  ", self.make_r_mat
        yield " Make gVec Mul   ", self.make_g_vec_mul
        yield " Make gVec time  ", self.make_g_vec
        yield " Cholesky bMat   ", self.cholesky_b_mat
        yield " Ste Pre time    ", self.step_predictor
        yield " Ste Cor time    ", self.step_corrector
        yield " solve           ", self.solve
        yield " sumDz           ", self.sum_dz
        yield " makedX          ", self.make_dx
        yield " symmetriseDx    ", self.symmetrise_dx
        yield " makedXdZ        ", self.make_dx_dz
        yield " xMatTime        ", self.x_mat_time
        yield " zMatTime        ", self.z_mat_time
        yield " invzMatTime     ", self.inv_z_mat_time
        yield " xMatzMatTime    ", self.x_mat_z_mat_time
        yield " EigxMatTime     ", self.eig_x_mat_time
        yield " EigzMatTime     ", self.eig_z_mat_time
        yield " EigxMatzMatTime ", self.eig_x_mat_z_mat_time
        yield " updateRes       ", self.update_res
        yield " EigTime         ", (
            self.eig_x_mat_time + self.eig_z_mat_time + self.eig_x_mat_z_mat_time
        )
        yield " sub_total_bMat  ", self.main_loop - self.make_b_mat
        yield " Main Loop       ", self.main_loop
        yield " File Check      ", self.file_check
        yield " File Change     ", self.file_change
        yield " File Read       ", self.file_read
        yield " Total           ", self.total_time

    def display(self, fpout: object = _STDOUT) -> None:
        """Write the timing table, with each entry as a share of the main loop."""
        out = _resolve_output(fpout)
        if out is None:
            return
        out.write("\n")
        out.write("                         Time(sec) ")
        out.write(" Ratio(% : MainLoop) \n")
        for label, value in self._rows():
            out.write(
                "%s=       %f,  %f\n" % (label, value, _ratio(value, self.main_loop))
            )
        out.write("\n")


class ParameterType(enum.Enum):
    """Preset parameter sets."""

    DEFAULT = "default"
    UNSTABLE_BUT_FAST = "unstable_but_fast"
    STABLE_BUT_SLOW = "stable_but_slow"


_PRESETS = {
    ParameterType.STABLE_BUT_SLOW: dict(
        max_iteration=1000, epsilon_star=1.0e-30, lambda_star=1.0e2,
        omega_star=2.0, lower_bound=-1.0e5, upper_bound=1.0e5,
        beta_star=0.2, beta_bar=0.4, gamma_star=0.5, epsilon_dash=1.0e-30,
    ),
    ParameterType.UNSTABLE_BUT_FAST: dict(
        max_iteration=100, epsilon_star=1.0e-30, lambda_star=1.0e2,
        omega_star=2.0, lower_bound=-1.0e5, upper_bound=1.0e5,
        beta_star=0.01, beta_bar=0.02, gamma_star=0.98, epsilon_dash=1.0e-30,
    ),
    ParameterType.DEFAULT: dict(
        max_iteration=200, epsilon_star=1.0e-30, lambda_star=1.0e4,
        omega_star=2.0, lower_bound=-1.0e5, upper_bound=1.0e5,
        beta_star=0.1, beta_bar=0.3, gamma_star=0.9, epsilon_dash=1.0e-30,
    ),
}

_FIELD_ORDER = (
    "max_iteration", "epsilon_star", "lambda_star", "omega_star",
    "lower_bound", "upper_bound", "beta_star", "beta_bar",
    "gamma_star", "epsilon_dash",
)


@dataclass
class Parameter:
    """Tuning parameters of the interior-point iteration."""

    max_iteration: int = 200
    epsilon_star: float = 1.0e-30
    lambda_star: float = 1.0e4
    omega_star: float = 2.0
    lower_bound: float = -1.0e5
    upper_bound: float = 1.0e5
    beta_star: float = 0.1
    beta_bar: float = 0.3
    gamma_star: float = 0.9
    epsilon_dash: float = 1.0e-30

    def set_default(self, kind: ParameterType = ParameterType.DEFAULT) -> None:
        """Load one of the preset parameter sets."""
        for name, value in _PRESETS[ParameterType(kind)].items():
            setattr(self, name, value)

    def read_file(self, stream: IO[str]) -> "Parameter":
        """Read the ten parameters, one per line, from the leading number of each line.

        Text after the number on a line is ignored, as are blank lines.
        Raises ValueError if the stream ends early or a line has no number.
        """
        lines = (line.strip() for line in stream)
        values = (line for line in lines if line)
        for name in _FIELD_ORDER:
            line = next(values, None)
            if line is None:
                raise ValueError(f"parameter file ends before {name}")
            pattern = _INT_PREFIX if name == "max_iteration" else _FLOAT_PREFIX
            match = pattern.match(line)
            if match is None:
                raise ValueError(f"cannot read {name} from line {line!r}")
            token = match.group(0)
            setattr(self, name, int(token) if name == "max_iteration" else float(token))
        return self

    def display(self, fpout: object = _STDOUT) -> None:
        """Write the parameters, one per line."""
        out = _resolve_output(fpout)
        if out is None:
            return
        out.write("maxIteration =    %d\n" % self.max_iteration)
        out.write("epsilonStar  = %8.3e\n" % self.epsilon_star)
        out.write("lambdaStar   = %8.3e\n" % self.lambda_star)
        out.write("omegaStar    = %8.3e\n" % self.omega_star)
        out.write("lowerBound   = %8.3e\n" % self.lower_bound)
        out.write("upperBound   = %8.3e\n" % self.upper_bound)
        out.write("betaStar     = %8.3e\n" % self.beta_star)
        out.write("betaBar      = %8.3e\n" % self.beta_bar)
        out.write("gammaStar    = %8.3e\n" % self.gamma_star)
        out.write("epsilonDash  = %8.3e\n" % self.epsilon_dash)