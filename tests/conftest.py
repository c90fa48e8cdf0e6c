"""Pytest configuration and shared fixtures."""

import pytest

from desktop_access.core.rbac import Grant, Resource, Role, Rule, Verb


@pytest.fixture
def sample_roles_config():
    """Sample role definition dictionary."""
    return {
        "roles": [
            {
                "name": "template-users",
                "description": "Launch ubuntu templates",
                "grants": ["ReadTemplates", "LaunchTemplates"],
                "rules": [
                    {
                        "verbs": ["read", "launch"],
                        "resources": ["templates"],
                        "resourcePatterns": ["^ubuntu-"],
                        "namespaces": ["default"],
                    },
                ],
            },
            {
                "name": "user-admins",
                "grants": ["ReadUsers", "WriteUsers"],
                "rules": [
                    {"verbs": ["*"], "resources": ["users"]},
                ],
            },
        ],
    }


@pytest.fixture
def template_role():
    return Role(
        name="template-users",
        rules=[
            Rule(
                verbs=[Verb.READ, Verb.LAUNCH],
                resources=[Resource.TEMPLATES],
                resource_patterns=["^ubuntu-"],
                namespaces=["default"],
            ),
        ],
        grants=Grant.READ_TEMPLATES | Grant.LAUNCH_TEMPLATES,
    )


@pytest.fixture
def role_reader_role():
    return Role(
        name="role-readers",
        rules=[
            Rule(
                verbs=[Verb.READ],
                resources=[Resource.ROLES],
                resource_patterns=["^template-"],
            ),
        ],
        grants=Grant.READ_ROLES,
    )
