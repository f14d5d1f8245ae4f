"""
Domain errors.

Every error subclasses ValueError, so services can be called
the same way as before: the API layer catches ValueError and
turns it into an HTTP response. The subclasses let the API
choose the right status code.
"""


class GLRulesError(ValueError):
    """Base class for all domain errors."""


class NotFoundError(GLRulesError):
    """The requested record does not exist or is soft-deleted."""


class InvalidDateRangeError(GLRulesError):
    """A rule set's start date is not strictly before its end date."""


class RuleSetOverlapError(GLRulesError):
    """A rule set's dates collide with another rule set of the same type."""


class DuplicateExternalIdError(GLRulesError):
    """Another active account already uses this ledger code."""


class DuplicateRuleError(GLRulesError):
    """A rule set would get a second default or a repeated target."""


class DefaultRuleRequiredError(GLRulesError):
    """The change would leave a rule set without its default rule."""


class NoDefaultRuleError(GLRulesError):
    """
    No rule matched and the rule set has no default rule.

    This is a data-integrity failure. It must reach an operator;
    an account is never assigned silently.
    """

    def __init__(self, rule_set_id: int | None = None):
        self.rule_set_id = rule_set_id
        if rule_set_id is None:
            message = "No matching rule and no default rule found"
        else:
            message = (
                f"Rule set {rule_set_id} has no default rule "
                f"and no other rule matched"
            )
        super().__init__(message)


class RuleSetTypeMismatchError(GLRulesError):
    """Rules may only be copied between rule sets of the same type."""
