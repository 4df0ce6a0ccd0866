"""Errors raised by the scoring model and the team search.

All of them are input or data-availability problems: the roster or the
constraints cannot produce a team. None of them is transient, so callers should
report the message and let the user fix the roster instead of retrying.
"""


class TeamOptimizerError(Exception):
    """Base class for team optimizer failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InsufficientRosterError(TeamOptimizerError):
    """Fewer than five eligible champions for the requested constraints."""


class NoHealerAvailableError(TeamOptimizerError):
    """A healer is required but the roster has none."""


class NoValidCombinationsError(TeamOptimizerError):
    """Candidate generation produced no teams."""


class InvalidTeamError(TeamOptimizerError):
    """A team is not exactly five distinct champions, or a swap index is out of range."""


class SearchCancelledError(TeamOptimizerError):
    """The caller asked the search to stop at a batch boundary."""


class UnknownReferenceDataWarning(UserWarning):
    """A champion references a rarity, tier or synergy missing from the tables.

    Scoring continues with a neutral default (no contribution, or a 1.0 multiplier).
    """
