"""Validation of role and rule definitions.

Rule evaluation never fails: a malformed pattern simply does not match.
This module reports such problems up front so role authors can fix them.
"""

import re
from dataclasses import dataclass
from typing import List

from .roles import Role
from .rules import Rule
from .vocabulary import Resource, Verb, is_known_resource, is_known_verb, to_string


@dataclass(frozen=True)
class RuleDiagnostic:
    """A problem found in a rule definition."""
    field: str
    value: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message} ({self.value!r})"


def validate_rule(rule: Rule) -> List[RuleDiagnostic]:
    """
    Check a rule for values that can never match as intended.

    Args:
        rule: Rule to check

    Returns:
        List of diagnostics, empty if the rule is clean
    """
    diagnostics = []

    for verb in rule.verbs:
        if not is_known_verb(verb):
            diagnostics.append(
                RuleDiagnostic("verbs", to_string(verb), "unknown verb")
            )

    for resource in rule.resources:
        if not is_known_resource(resource):
            diagnostics.append(
                RuleDiagnostic("resources", to_string(resource), "unknown resource")
            )

    for pattern in rule.resource_patterns:
        try:
            re.compile(pattern)
        except re.error as e:
            diagnostics.append(
                RuleDiagnostic("resourcePatterns", pattern, f"invalid regular expression: {e}")
            )

    # Service accounts are only ever "used" when launching a session
    names_service_accounts = any(
        to_string(r) == Resource.SERVICE_ACCOUNTS.value for r in rule.resources
    )
    if names_service_accounts:
        for verb in rule.verbs:
            if to_string(verb) not in (Verb.USE.value, Verb.ALL.value):
                diagnostics.append(
                    RuleDiagnostic(
                        "verbs",
                        to_string(verb),
                        "only 'use' is evaluated for serviceaccounts",
                    )
                )

    return diagnostics


def validate_role(role: Role) -> List[str]:
    """
    Check every rule of a role.

    Returns:
        Human readable messages prefixed with the rule index
    """
    messages = []
    for index, rule in enumerate(role.rules):
        for diagnostic in validate_rule(rule):
            messages.append(f"{role.name}: rules[{index}].{diagnostic}")
    return messages
