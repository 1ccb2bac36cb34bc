"""
Narrative explanations for the tutorial.

The ``explain_*`` functions take a fitted result object and return
formatted multi-line text. Result classes call them from
``executive_summary()``; the document renderer uses them for its prose.
"""
from __future__ import annotations

_SEP = "━" * 66


# ── Shared helpers ─────────────────────────────────────────────────────────────

def _fmt_p(p: float) -> str:
    if p < 0.001:
        return "p < 0.001"
    return f"p = {p:.3f}"


def _fmt_ci(lo: float, hi: float) -> str:
    return f"[{lo:.4f}, {hi:.4f}]"


def _pp(value: float) -> str:
    """Signed percentage points for an effect on a binary outcome."""
    return f"{value * 100:+.1f} percentage points"


def _effect_phrase(effect: float, cause: str, outcome: str) -> str:
    direction = "raise" if effect >= 0 else "lower"
    return (
        f"{cause} is estimated to {direction} the probability of {outcome} "
        f"by {abs(effect) * 100:.1f} percentage points"
    )


def _assumptions_section(assumptions: list) -> str:
    n = len(assumptions)
    n_u = sum(1 for a in assumptions if not a.testable)

    if n_u == n:
        intro = (
            f"All {n} required assumptions are untestable from the data alone "
            f"and must be justified by how the study was run."
        )
    elif n_u == 0:
        intro = f"All {n} required assumptions can be checked in the data."
    else:
        intro = (
            f"{n_u} of the {n} required assumptions {'is' if n_u == 1 else 'are'} untestable "
            f"and must be justified by how the study was run; "
            f"{n - n_u} can be checked in the data."
        )

    lines = ["ASSUMPTIONS", intro, ""]
    for a in assumptions:
        lines.append(f"  {a.fmt_tag()}  {a.name}")
    return "\n".join(lines)


def _result_line(result) -> str:
    lo, hi = result.conf_int
    return (
        f"(95% CI: {_fmt_ci(lo, hi)}, SE = {result.std_err:.4f}, {_fmt_p(result.pvalue)})"
    )


# ── Section prose ──────────────────────────────────────────────────────────────

def explain_study(data, instrument: str, treatment: str, outcome: str) -> str:
    share = data[instrument].mean()
    return (
        f"{len(data)} people were surveyed. {share:.0%} of them were picked at "
        f"random to receive SMS reminders to sleep under a net (`{instrument}`). "
        f"We record whether they used a net (`{treatment}`) and whether they were "
        f"later diagnosed with malaria (`{outcome}`). All three variables are 0/1."
    )


def explain_exploration(table) -> str:
    gap = table.take_up(1) - table.take_up(0)
    if gap > 0:
        pattern = "Orange points (SMS) are over-represented in the net-users column"
    elif gap < 0:
        pattern = "Orange points (SMS) are under-represented in the net-users column"
    else:
        pattern = "Orange points (SMS) are spread across both columns like the rest"
    return (
        f"Every variable is binary, so the points are jittered to make the four "
        f"clusters readable. {pattern}: {table.take_up(1):.1%} of SMS recipients "
        f"used a net, against {table.take_up(0):.1%} of everyone else."
    )


def explain_compliance(table) -> str:
    return (
        f"Of the {table.total} people in the study, {table.take_up(1):.1%} of those "
        f"who received an SMS used a net, against {table.take_up(0):.1%} of those who "
        f"did not. Assuming nobody was put off nets by the message (no defiers), "
        f"the people who used a net without an SMS are always-takers "
        f"({table.always_taker_share:.1%} of the population) and the people who "
        f"ignored the SMS are never-takers ({table.never_taker_share:.1%}). The "
        f"remaining {table.complier_share:.1%} are compliers: they use a net if and "
        f"only if encouraged. Compliers are never identifiable individually, since "
        f"an encouraged net user may be a complier or an always-taker."
    )


def explain_first_stage(fs) -> str:
    verdict = (
        "comfortably above the rule-of-thumb threshold, so the instrument is strong"
        if fs.is_strong else
        "below the rule-of-thumb threshold, so the instrument is weak and 2SLS "
        "estimates should not be trusted"
    )
    return (
        f"Regressing {fs._treatment} on {fs._instrument} gives a coefficient of "
        f"{fs.coefficient:.4f} (SE = {fs.std_err:.4f}): the encouragement changes "
        f"take-up by {_pp(fs.coefficient)}. The F-statistic for the instrument is "
        f"{fs.f_stat:.2f}, {verdict} (F > {fs.threshold:.0f})."
    )


def explain_naive(result) -> str:
    T, Y = result._regressor, result._outcome
    blocks = [
        "\n".join([_SEP, "Executive Summary — Naive OLS", f"  {T} → {Y}", _SEP]),
        "\n".join([
            "METHOD",
            f"Ordinary least squares of {Y} on {T} compares the infection rate of "
            f"people who used a net with the rate of people who did not.",
        ]),
        _assumptions_section(result.assumptions),
        "\n".join([
            "RESULT",
            f"Net users' {Y} rate differs by {_pp(result.effect)} "
            f"{_result_line(result)}.",
        ]),
        "\n".join([
            "CAVEATS",
            f"Net use was chosen, not assigned. People who would use a net anyway "
            f"tend to be at lower risk to begin with, so this difference mixes the "
            f"protective effect of the net with who chooses to use one. It is "
            f"biased and should not be read causally.",
        ]),
        _SEP,
    ]
    return "\n\n".join(blocks)


def explain_itt(result) -> str:
    Z, Y = result._regressor, result._outcome
    blocks = [
        "\n".join([_SEP, "Executive Summary — Intent-to-Treat", f"  {Z} → {Y}", _SEP]),
        "\n".join([
            "METHOD",
            f"Because {Z} was randomly assigned, regressing {Y} on {Z} estimates the "
            f"causal effect of being offered the encouragement, whoever then acted on it.",
        ]),
        _assumptions_section(result.assumptions),
        "\n".join([
            "RESULT",
            f"Being assigned to the {Z} group changes the {Y} rate by "
            f"{_pp(result.effect)} {_result_line(result)}.",
        ]),
        "\n".join([
            "CAVEATS",
            f"The ITT answers a policy question (what happens if we send the SMS?) "
            f"rather than a medical one (what does a net do?). Always-takers and "
            f"never-takers do not change behaviour, so their zero response dilutes "
            f"the ITT toward zero.",
        ]),
        _SEP,
    ]
    return "\n\n".join(blocks)


def explain_iv(result) -> str:
    T, Y, Z = result._treatment, result._outcome, result._instrument
    fs = result.first_stage
    bias = result.unadjusted_effect - result.effect

    blocks = [
        "\n".join([_SEP, "Executive Summary — Instrumental Variables (2SLS)",
                   f"  {T} → {Y}  |  instrument: {Z}", _SEP]),

        "\n".join([
            "METHOD",
            f"Two-Stage Least Squares uses {Z} to isolate the variation in {T} that "
            f"the random encouragement caused. In the first stage, {Z} predicts {T}. "
            f"In the second stage, only that predicted variation is used to estimate "
            f"the effect on {Y}. With one binary instrument this is the Wald ratio "
            f"ITT / first stage = {result.itt_effect:.4f} / {fs.coefficient:.4f} "
            f"= {result.wald_effect:.4f}. The result is a Local Average Treatment "
            f"Effect (LATE): the effect for compliers.",
        ]),

        _assumptions_section(result.assumptions),

        "\n".join([
            "RESULT",
            f"Among compliers, {_effect_phrase(result.effect, T, Y)} "
            f"{_result_line(result)}.",
            "",
            f"The naive OLS estimate was {result.unadjusted_effect:.4f}. The "
            f"difference of {abs(bias):.4f} is the selection bias that comes from "
            f"comparing people who chose to use nets with people who did not.",
        ]),

        "\n".join([
            "CAVEATS",
            f"The exclusion restriction, that {Z} affects {Y} only through {T}, is "
            f"untestable: an SMS that also prompted people to clear standing water "
            f"would violate it. If the instrument is weak (first-stage F = "
            f"{fs.f_stat:.2f} here), 2SLS is biased toward OLS. The LATE describes "
            f"compliers only and need not carry over to always-takers or never-takers.",
        ]),

        _SEP,
    ]
    return "\n\n".join(blocks)


def explain_comparison(result) -> str:
    """Contrast the naive, ITT and 2SLS estimates held by an ``IVResult``."""
    naive, itt, late = result.unadjusted_effect, result.itt_effect, result.effect
    take_up = result.first_stage.coefficient

    if naive == late:
        naive_text = "The naive estimate happens to coincide with the LATE."
    elif naive * late < 0:
        naive_text = (
            "The naive estimate does not even agree with the LATE on the direction "
            "of the effect."
        )
    else:
        size = "overstates" if abs(naive) > abs(late) else "understates"
        risk = "lower" if naive < late else "higher"
        naive_text = (
            f"The naive estimate ({naive:.4f}) {size} the size of the effect the LATE "
            f"finds ({late:.4f}), because net users were at {risk} risk anyway."
        )

    if 0 < take_up < 1:
        itt_text = (
            f"The ITT ({itt:.4f}) is diluted because only {take_up:.0%} of people "
            f"changed their net use in response to the SMS."
        )
    else:
        itt_text = (
            f"The ITT ({itt:.4f}) is the effect of the SMS itself, whatever it did "
            f"to net use."
        )
    return (
        f"{naive_text} {itt_text} The LATE divides the ITT by the first-stage "
        f"coefficient ({take_up:.4f}), the share of compliers."
    )


def explain_weak_instrument(comparison) -> str:
    return (
        f"Multiplying the instrument's contribution to the regressor by "
        f"{comparison.attenuation} leaves everything else untouched, yet the "
        f"first-stage F-statistic falls from {comparison.strong.f_stat:.1f} to "
        f"{comparison.weak.f_stat:.1f} (R² from {comparison.strong.rsquared:.3f} to "
        f"{comparison.weak.rsquared:.4f}). The 2SLS estimate moves from "
        f"{comparison.strong_iv:.3f} to {comparison.weak_iv:.3f} against a true effect "
        f"of {comparison.beta}. A single draw can land anywhere; the Monte Carlo "
        f"below shows the pattern."
    )


def explain_monte_carlo(table, threshold: float) -> str:
    strong, weak = table.loc["strong_iv"], table.loc["weak_iv"]
    return (
        f"Across replications the strong-instrument 2SLS estimates are centred on "
        f"the truth (median bias {strong['median_bias']:+.3f}, IQR {strong['iqr']:.3f}). "
        f"With the weak instrument the median bias is {weak['median_bias']:+.3f}, "
        f"pulled toward the OLS estimate, and the IQR widens to {weak['iqr']:.3f}. "
        f"{weak['share_f_above_threshold']:.0%} of weak-instrument samples pass the "
        f"F > {threshold:g} rule of thumb, against "
        f"{strong['share_f_above_threshold']:.0%} of strong-instrument samples."
    )
