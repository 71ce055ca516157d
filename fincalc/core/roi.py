"""Return on investment, net present value and internal rate of return."""

from __future__ import annotations

import math
import sys
from typing import Callable, List, Optional, Sequence, Tuple

from fincalc.core.context import CalculationContext, resolve
from fincalc.core.numeric import checked_power, safe_divide
from fincalc.logging_config import get_logger
from fincalc.schemas.roi import IRRSolution, ROIInputs, ROIResult

logger = get_logger(__name__)

# Per-period search interval for the IRR root. Within it (1 + rate) ** t stays
# finite for several hundred periods.
IRR_MIN_RATE = -0.5
IRR_MAX_RATE = 1.0
BRACKET_GROWTH = 1.6


def npv(periodic_rate: float, cash_flows: Sequence[float]) -> float:
    """Net present value with ``cash_flows[0]`` at t = 0."""
    if periodic_rate <= -1:
        raise ValueError("periodic_rate must be greater than -1")
    return math.fsum(cf * (1 + periodic_rate) ** -t for t, cf in enumerate(cash_flows))


def _find_bracket(
    f: Callable[[float], float], max_steps: int
) -> Optional[Tuple[float, float, float, float]]:
    """Grow [0, 0.1] outward until ``f`` changes sign or both limits are hit."""
    lo, hi = 0.0, 0.1
    f_lo, f_hi = f(lo), f(hi)
    for _ in range(max_steps):
        if f_lo * f_hi <= 0:
            return lo, hi, f_lo, f_hi
        if (abs(f_lo) < abs(f_hi) and lo > IRR_MIN_RATE) or hi >= IRR_MAX_RATE:
            if lo <= IRR_MIN_RATE:
                return None
            lo = max(IRR_MIN_RATE, lo + BRACKET_GROWTH * (lo - hi))
            f_lo = f(lo)
        else:
            hi = min(IRR_MAX_RATE, hi + BRACKET_GROWTH * (hi - lo))
            f_hi = f(hi)
    if f_lo * f_hi <= 0:
        return lo, hi, f_lo, f_hi
    return None


def _brent(
    f: Callable[[float], float],
    a: float,
    b: float,
    fa: float,
    fb: float,
    tolerance: float,
    max_iterations: int,
) -> Tuple[float, bool, int]:
    """
    Brent's method on a bracket [a, b] with f(a)·f(b) <= 0.

    Combines inverse quadratic interpolation, the secant step and bisection,
    falling back to bisection whenever the interpolated step would not shrink
    the bracket fast enough. Returns (root, converged, iterations).
    """
    if fa == 0:
        return a, True, 0
    if fb == 0:
        return b, True, 0

    c, fc = b, fb
    d = e = b - a
    for iteration in range(1, max_iterations + 1):
        if (fb > 0 and fc > 0) or (fb < 0 and fc < 0):
            c, fc = a, fa
            d = e = b - a
        if abs(fc) < abs(fb):
            a, b, c = b, c, b
            fa, fb, fc = fb, fc, fb

        tol1 = 2 * sys.float_info.epsilon * abs(b) + 0.5 * tolerance
        xm = 0.5 * (c - b)
        if abs(xm) <= tol1 or fb == 0:
            return b, True, iteration

        if abs(e) >= tol1 and abs(fa) > abs(fb):
            s = fb / fa
            if a == c:
                # secant
                p = 2 * xm * s
                q = 1 - s
            else:
                # inverse quadratic interpolation
                q = fa / fc
                r = fb / fc
                p = s * (2 * xm * q * (q - r) - (b - a) * (r - 1))
                q = (q - 1) * (r - 1) * (s - 1)
            if p > 0:
                q = -q
            p = abs(p)
            if 2 * p < min(3 * xm * q - abs(tol1 * q), abs(e * q)):
                e, d = d, p / q
            else:
                d = e = xm
        else:
            d = e = xm

        a, fa = b, fb
        b += d if abs(d) > tol1 else math.copysign(tol1, xm)
        fb = f(b)

    return b, False, max_iterations


def irr(cash_flows: Sequence[float], ctx: Optional[CalculationContext] = None) -> IRRSolution:
    """
    Per-period internal rate of return: the rate at which ``npv`` is zero.

    The root is bracketed by expanding outward from [0, 0.1] inside
    [IRR_MIN_RATE, IRR_MAX_RATE] and then refined with Brent's method.
    Failure is reported in the returned solution, never raised.
    """
    ctx = resolve(ctx)
    flows = list(cash_flows)
    if len(flows) < 2 or not any(cf > 0 for cf in flows) or not any(cf < 0 for cf in flows):
        return IRRSolution(converged=False, reason="cash flows never change sign")

    def f(rate: float) -> float:
        return npv(rate, flows)

    bracket = _find_bracket(f, ctx.irr_max_iterations)
    if bracket is None:
        logger.warning("irr_no_bracket", periods=len(flows))
        return IRRSolution(
            converged=False,
            reason=f"no root between {IRR_MIN_RATE:g} and {IRR_MAX_RATE:g} per period",
        )

    rate, converged, iterations = _brent(f, *bracket, ctx.irr_tolerance, ctx.irr_max_iterations)
    if not converged:
        logger.warning("irr_not_converged", iterations=iterations, last_rate=rate)
        return IRRSolution(rate=None, converged=False, iterations=iterations, reason="iteration limit reached")
    return IRRSolution(rate=rate, converged=True, iterations=iterations, reason="converged")


def calculate_roi(inputs: ROIInputs, ctx: Optional[CalculationContext] = None) -> ROIResult:
    """
    Appraise a project with a flat monthly net cash flow.

    One-time revenue is spread evenly over the duration when deriving the
    monthly cash flow; the salvage value arrives with the last month.
    """
    ctx = resolve(ctx)
    months = inputs.project_duration
    investment = inputs.initial_investment

    recurring = inputs.monthly_revenue * months if inputs.revenue_type == "recurring" else 0.0
    total_revenue = recurring + inputs.one_time_revenue
    total_costs = (inputs.operating_costs + inputs.maintenance_costs) * months

    net_before_tax = total_revenue - total_costs + inputs.salvage_value - investment
    tax_amount = max(0.0, net_before_tax * inputs.tax_rate / 100)
    net_profit = net_before_tax - tax_amount

    roi = safe_divide(net_before_tax, investment) * 100
    growth = 1 + roi / 100
    warnings: List[str] = []
    annualized: Optional[float] = -100.0
    if growth > 0:
        compounded = checked_power(growth, 12 / months)
        if compounded.ok:
            annualized = (compounded.value - 1) * 100
        else:
            annualized = None
            warnings.append("annualized ROI is out of range")
            logger.info("annualized_roi_out_of_range", roi=roi, months=months)

    monthly_cash_flow = (total_revenue - total_costs) / months
    payback = investment / monthly_cash_flow if monthly_cash_flow > 0 else None

    flows: List[float] = [-investment] + [monthly_cash_flow] * months
    flows[-1] += inputs.salvage_value
    npv_value = npv(inputs.discount_rate / 1200, flows)
    solution = irr(flows, ctx)

    return ROIResult(
        total_revenue=total_revenue,
        total_costs=total_costs,
        net_profit_before_tax=net_before_tax,
        tax_amount=tax_amount,
        net_profit=net_profit,
        roi=roi,
        roi_after_tax=safe_divide(net_profit, investment) * 100,
        annualized_roi=annualized,
        monthly_net_cash_flow=monthly_cash_flow,
        payback_months=payback,
        npv=npv_value,
        irr=solution.rate * 12 * 100 if solution.converged else None,
        irr_converged=solution.converged,
        irr_iterations=solution.iterations,
        profitability_index=safe_divide(npv_value + investment, investment),
        warnings=warnings if solution.converged else warnings + [f"IRR not found: {solution.reason}"],
    )
