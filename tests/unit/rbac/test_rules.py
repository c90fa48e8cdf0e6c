"""Tests for access rule evaluation."""

import pytest

from desktop_access.core.rbac.rules import (
    Action,
    Rule,
    dedupe_rules,
    rule_lists_equal,
)
from desktop_access.core.rbac.vocabulary import NAMESPACE_ALL, Resource, Verb


class TestEmptyRule:
    """Test the empty rule."""

    def test_default_rule_is_empty(self):
        assert Rule().is_empty()

    @pytest.mark.parametrize("field, value", [
        ("verbs", [Verb.READ]),
        ("resources", [Resource.USERS]),
        ("resource_patterns", [".*"]),
        ("namespaces", ["default"]),
    ])
    def test_any_field_makes_rule_non_empty(self, field, value):
        assert not Rule(**{field: value}).is_empty()

    def test_empty_rule_matches_nothing(self):
        rule = Rule()
        assert not rule.has_verb(Verb.READ)
        assert not rule.has_resource_type(Resource.TEMPLATES)
        assert not rule.has_namespace("default")
        assert not rule.matches_resource_name("anything")
        assert not rule.authorizes(Action(Verb.READ, Resource.TEMPLATES))


class TestHasVerb:
    """Test verb matching."""

    def test_exact_match(self):
        rule = Rule(verbs=[Verb.READ, Verb.LAUNCH])
        assert rule.has_verb(Verb.READ)
        assert rule.has_verb(Verb.LAUNCH)
        assert not rule.has_verb(Verb.DELETE)

    def test_plain_string_matches_enum(self):
        rule = Rule(verbs=[Verb.READ])
        assert rule.has_verb("read")

    @pytest.mark.parametrize("verb", list(Verb) + ["approve", "not-a-verb"])
    def test_wildcard_matches_every_verb(self, verb):
        assert Rule(verbs=[Verb.ALL]).has_verb(verb)

    def test_wildcard_position_does_not_matter(self):
        rule = Rule(verbs=[Verb.READ, Verb.CREATE, "*"])
        assert rule.has_verb(Verb.DELETE)

    def test_empty_verbs_match_nothing(self):
        assert not Rule(resources=[Resource.ALL]).has_verb(Verb.READ)


class TestHasResourceType:
    """Test resource type matching."""

    def test_exact_match(self):
        rule = Rule(resources=[Resource.USERS])
        assert rule.has_resource_type(Resource.USERS)
        assert not rule.has_resource_type(Resource.ROLES)

    @pytest.mark.parametrize("resource", list(Resource) + ["desktops"])
    def test_wildcard_matches_every_resource(self, resource):
        assert Rule(resources=[Resource.ALL]).has_resource_type(resource)


class TestHasNamespace:
    """Test namespace matching."""

    def test_exact_match(self):
        rule = Rule(namespaces=["default", "team-a"])
        assert rule.has_namespace("team-a")
        assert not rule.has_namespace("team-b")

    @pytest.mark.parametrize("namespace", ["default", "kube-system", ""])
    def test_wildcard_matches_every_namespace(self, namespace):
        assert Rule(namespaces=["team-a", NAMESPACE_ALL]).has_namespace(namespace)


class TestMatchesResourceName:
    """Test resource name pattern matching."""

    @pytest.mark.parametrize("name", ["", "foo", "anything-else"])
    def test_no_patterns_never_match(self, name):
        assert not Rule(verbs=[Verb.ALL]).matches_resource_name(name)

    def test_prefix_pattern(self):
        rule = Rule(resource_patterns=["^foo-"])
        assert rule.matches_resource_name("foo-bar")
        assert not rule.matches_resource_name("bar-foo")

    def test_unanchored_pattern_searches(self):
        rule = Rule(resource_patterns=["buntu"])
        assert rule.matches_resource_name("ubuntu-xfce")

    def test_any_pattern_can_match(self):
        rule = Rule(resource_patterns=["^a$", "^b$"])
        assert rule.matches_resource_name("b")
        assert not rule.matches_resource_name("c")

    def test_invalid_pattern_is_skipped(self):
        rule = Rule(resource_patterns=["(unclosed", "^ok$"])
        assert rule.matches_resource_name("ok")
        assert not rule.matches_resource_name("anything-else")

    def test_only_invalid_patterns_never_match(self):
        rule = Rule(resource_patterns=["(unclosed", "[a-"])
        assert not rule.matches_resource_name("(unclosed")

    def test_python_regex_syntax(self):
        """Lookaheads are valid Python regular expressions and are applied."""
        rule = Rule(resource_patterns=["^(?!admin)"])
        assert rule.matches_resource_name("ubuntu")
        assert not rule.matches_resource_name("admin-desktop")


class TestDeepEqual:
    """Test structural rule equality."""

    def test_reflexive(self):
        rule = Rule(
            verbs=[Verb.READ, Verb.READ, Verb.ALL],
            resources=[Resource.TEMPLATES],
            resource_patterns=["(unclosed", ".*"],
            namespaces=["b", "a"],
        )
        assert rule.deep_equal(rule)
        assert Rule().deep_equal(Rule())

    def test_order_insensitive(self):
        a = Rule(
            verbs=[Verb.READ, Verb.LAUNCH],
            resources=[Resource.TEMPLATES, Resource.USERS],
            resource_patterns=["^a", "^b"],
            namespaces=["x", "y"],
        )
        b = Rule(
            verbs=[Verb.LAUNCH, Verb.READ],
            resources=[Resource.USERS, Resource.TEMPLATES],
            resource_patterns=["^b", "^a"],
            namespaces=["y", "x"],
        )
        assert a.deep_equal(b)
        assert b.deep_equal(a)

    def test_duplicates_are_significant(self):
        a = Rule(verbs=[Verb.READ, Verb.READ])
        b = Rule(verbs=[Verb.READ])
        assert not a.deep_equal(b)
        assert not b.deep_equal(a)

    def test_patterns_compared_as_written(self):
        a = Rule(resource_patterns=["^ubuntu$"])
        b = Rule(resource_patterns=["^(ubuntu)$"])
        for name in ("ubuntu", "debian"):
            assert a.matches_resource_name(name) == b.matches_resource_name(name)
        assert not a.deep_equal(b)

    def test_wildcard_not_expanded(self):
        everything = Rule(verbs=[Verb.ALL])
        listed = Rule(verbs=[v for v in Verb if v is not Verb.ALL])
        assert not everything.deep_equal(listed)

    def test_enum_and_string_compare_equal(self):
        assert Rule(verbs=[Verb.ALL]).deep_equal(Rule(verbs=["*"]))

    def test_field_differences(self):
        base = Rule(verbs=[Verb.READ], resources=[Resource.USERS])
        assert not base.deep_equal(Rule(verbs=[Verb.READ], resources=[Resource.ROLES]))
        assert not base.deep_equal(
            Rule(verbs=[Verb.READ], resources=[Resource.USERS], namespaces=["default"])
        )

    def test_does_not_reorder_fields(self):
        a = Rule(verbs=[Verb.UPDATE, Verb.CREATE], namespaces=["z", "a"])
        b = Rule(verbs=[Verb.CREATE, Verb.UPDATE], namespaces=["a", "z"])
        assert a.deep_equal(b)
        assert a.verbs == (Verb.UPDATE, Verb.CREATE)
        assert a.namespaces == ("z", "a")


class TestAuthorizes:
    """Test single rule authorization."""

    @pytest.fixture
    def launch_rule(self):
        return Rule(
            verbs=[Verb.LAUNCH],
            resources=[Resource.TEMPLATES],
            resource_patterns=["^ubuntu-"],
            namespaces=["default"],
        )

    def test_matching_action(self, launch_rule):
        action = Action(Verb.LAUNCH, Resource.TEMPLATES, "ubuntu-xfce", "default")
        assert launch_rule.authorizes(action)

    def test_wrong_verb_or_resource(self, launch_rule):
        assert not launch_rule.authorizes(Action(Verb.DELETE, Resource.TEMPLATES, "ubuntu-xfce"))
        assert not launch_rule.authorizes(Action(Verb.LAUNCH, Resource.USERS, "ubuntu-xfce"))

    def test_name_must_match_patterns(self, launch_rule):
        action = Action(Verb.LAUNCH, Resource.TEMPLATES, "debian-xfce", "default")
        assert not launch_rule.authorizes(action)

    def test_name_ignored_without_patterns(self):
        rule = Rule(verbs=[Verb.READ], resources=[Resource.USERS])
        assert rule.authorizes(Action(Verb.READ, Resource.USERS, "alice"))

    def test_missing_name_is_not_checked(self, launch_rule):
        assert launch_rule.authorizes(Action(Verb.LAUNCH, Resource.TEMPLATES))

    def test_namespace_must_match_for_launch(self, launch_rule):
        action = Action(Verb.LAUNCH, Resource.TEMPLATES, "ubuntu-xfce", "team-a")
        assert not launch_rule.authorizes(action)

    def test_namespace_ignored_for_other_actions(self):
        rule = Rule(verbs=[Verb.READ], resources=[Resource.TEMPLATES], namespaces=["default"])
        assert rule.authorizes(Action(Verb.READ, Resource.TEMPLATES, "x", "team-a"))

    def test_namespace_ignored_without_namespaces(self):
        rule = Rule(verbs=[Verb.LAUNCH], resources=[Resource.TEMPLATES])
        assert rule.authorizes(Action(Verb.LAUNCH, Resource.TEMPLATES, "x", "team-a"))

    def test_namespace_wildcard(self):
        rule = Rule(verbs=[Verb.LAUNCH], resources=[Resource.TEMPLATES], namespaces=["*"])
        assert rule.authorizes(Action(Verb.LAUNCH, Resource.TEMPLATES, "x", "team-a"))

    def test_patterns_without_verbs_authorize_nothing(self):
        rule = Rule(resource_patterns=[".*"], namespaces=["*"])
        assert not rule.authorizes(Action(Verb.READ, Resource.TEMPLATES, "x"))


class TestAction:
    """Test action helpers."""

    def test_only_template_launch_is_namespaced(self):
        assert Action(Verb.LAUNCH, Resource.TEMPLATES).is_namespaced()
        assert Action("launch", "templates").is_namespaced()
        assert not Action(Verb.READ, Resource.TEMPLATES).is_namespaced()
        assert not Action(Verb.LAUNCH, Resource.USERS).is_namespaced()

    def test_string_format(self):
        assert str(Action(Verb.READ, Resource.USERS)) == "read users"
        assert str(Action(Verb.LAUNCH, Resource.TEMPLATES, "ubuntu", "default")) == (
            "launch default/templates/ubuntu"
        )


class TestSerialization:
    """Test rule dictionaries."""

    def test_from_dict(self):
        rule = Rule.from_dict({
            "verbs": ["read", "launch"],
            "resources": ["templates"],
            "resourcePatterns": ["^ubuntu-"],
            "namespaces": ["default"],
        })
        assert rule.verbs == (Verb.READ, Verb.LAUNCH)
        assert rule.resources == (Resource.TEMPLATES,)
        assert rule.resource_patterns == ("^ubuntu-",)
        assert rule.namespaces == ("default",)

    @pytest.mark.parametrize("data", [None, {}, {"verbs": None, "namespaces": None}])
    def test_missing_fields_are_empty(self, data):
        rule = Rule.from_dict(data)
        assert rule.is_empty()
        assert rule.deep_equal(Rule())

    def test_unknown_values_are_kept(self):
        rule = Rule.from_dict({"verbs": ["approve"], "resources": ["desktops"]})
        assert rule.verbs == ("approve",)
        assert rule.has_verb("approve")
        assert rule.has_resource_type("desktops")

    def test_to_dict_omits_empty_fields(self):
        rule = Rule(verbs=[Verb.ALL], resources=[Resource.USERS])
        assert rule.to_dict() == {"verbs": ["*"], "resources": ["users"]}
        assert Rule().to_dict() == {}

    def test_snake_case_patterns_accepted(self):
        rule = Rule.from_dict({"resource_patterns": [".*"]})
        assert rule.resource_patterns == (".*",)

    @pytest.mark.parametrize("data", [
        {"verbs": "read", "resources": ["templates"]},
        {"verbs": ["read"], "resources": "templates"},
        {"verbs": ["read"], "resources": ["templates"], "resourcePatterns": "^ubuntu-"},
        {"verbs": ["read"], "resources": ["templates"], "resource_patterns": "^ubuntu-"},
        {"verbs": ["launch"], "resources": ["templates"], "namespaces": "default"},
    ])
    def test_scalar_field_rejected(self, data):
        with pytest.raises(ValueError):
            Rule.from_dict(data)

    def test_scalar_pattern_does_not_widen_access(self):
        data = {"verbs": ["read"], "resources": ["templates"], "resourcePatterns": "^ubuntu-"}
        with pytest.raises(ValueError, match="resourcePatterns"):
            Rule.from_dict(data)

    @pytest.mark.parametrize("data", ["verbs: read", ["read"], 42])
    def test_non_mapping_rejected(self, data):
        with pytest.raises(ValueError):
            Rule.from_dict(data)

    def test_string_field_rejected_by_constructor(self):
        with pytest.raises(TypeError):
            Rule(resource_patterns="^ubuntu-")


class TestRuleLists:
    """Test comparisons over lists of rules."""

    def test_dedupe_keeps_first(self):
        a = Rule(verbs=[Verb.READ, Verb.LAUNCH])
        b = Rule(verbs=[Verb.LAUNCH, Verb.READ])
        c = Rule(verbs=[Verb.DELETE])
        assert dedupe_rules([a, b, c]) == [a, c]

    def test_dedupe_keeps_duplicate_sensitive_rules(self):
        a = Rule(verbs=[Verb.READ])
        b = Rule(verbs=[Verb.READ, Verb.READ])
        assert dedupe_rules([a, b]) == [a, b]

    def test_rule_lists_equal_ignores_order(self):
        a = Rule(verbs=[Verb.READ])
        b = Rule(verbs=[Verb.DELETE])
        assert rule_lists_equal([a, b], [b, a])
        assert not rule_lists_equal([a, b], [a])
        assert not rule_lists_equal([a, a], [a, b])
        assert rule_lists_equal([], [])
