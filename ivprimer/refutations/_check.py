from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Assumption:
    """
    One assumption needed to read an estimate causally.

    ``testable`` says whether the data can speak to it (instrument relevance
    can be checked with a first-stage regression) or whether it has to be
    argued from how the study was run (nobody can test that an SMS affects
    malaria only through net use).
    """

    name: str
    """Human-readable statement of the assumption."""

    testable: bool
    """``True`` if the assumption has an empirical check in the data."""

    def fmt_tag(self) -> str:
        """Fixed-width bracketed testability label used in summaries."""
        return "[  testable  ]" if self.testable else "[ untestable ]"


@dataclass(frozen=True)
class RefutationCheck:
    """Outcome of a single diagnostic check."""

    name: str
    passed: bool
    detail: str

    @property
    def status(self) -> str:
        return "PASS" if self.passed else "FAIL"

    def __repr__(self) -> str:
        return f"RefutationCheck({self.status!r}, {self.name!r})"


class RefutationReport:
    """
    Base class for a list of diagnostic checks with an overall verdict.

    Subclasses supply ``_header_lines()``; ``checks``, ``passed``,
    ``failed_checks`` and ``summary()`` are shared.
    """

    def __init__(
        self,
        checks: list[RefutationCheck],
        treatment: str,
        outcome: str,
    ) -> None:
        self._checks = list(checks)
        self._treatment = treatment
        self._outcome = outcome

    def _header_lines(self) -> list[str]:
        raise NotImplementedError

    @property
    def checks(self) -> list[RefutationCheck]:
        """All checks, in the order they were run."""
        return list(self._checks)

    @property
    def passed(self) -> bool:
        """``True`` if every check passed."""
        return all(c.passed for c in self._checks)

    @property
    def failed_checks(self) -> list[RefutationCheck]:
        return [c for c in self._checks if not c.passed]

    def summary(self) -> str:
        lines = ["", *self._header_lines(), "─" * 50]
        for check in self._checks:
            lines.append(f"  [{check.status}]  {check.name}: {check.detail}")
        lines.append("")
        if self.passed:
            lines.append("  All checks passed.")
        else:
            lines.append(f"  {len(self.failed_checks)} check(s) failed, see above.")
        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()
