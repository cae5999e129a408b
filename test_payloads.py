"""Tests for JQL rendering and Jira request bodies."""

from datetime import date

import pytest

from models import IssueQuery
from payloads import (
    adf_document,
    adf_text,
    build_jql,
    child_fields,
    child_query,
    children_query,
    jql_string,
    parent_fields,
    parent_created_after,
    parent_query,
    parent_summary,
)


class TestJql:

    def test_parent_query(self):
        jql = build_jql(parent_query("TT", date(2024, 3, 5), "Jane D"))
        assert jql == (
            'project = TT AND summary ~ "Time Tracking March for Jane D" '
            'AND created >= "2024-02-01" AND type = "Story" ORDER BY created DESC'
        )

    def test_child_query(self):
        jql = build_jql(child_query("TT-1", date(2024, 3, 5)))
        assert jql == 'parent = TT-1 AND summary ~ "05.03.2024" AND type = "Sub-task"'

    def test_children_query(self):
        jql = build_jql(children_query("TT-1"))
        assert jql == 'parent = TT-1 AND type = "Sub-task" ORDER BY key ASC'

    @pytest.mark.parametrize(
        "month, expected",
        [
            (date(2024, 3, 5), date(2024, 2, 1)),
            (date(2025, 1, 31), date(2024, 12, 1)),
            (date(2024, 12, 1), date(2024, 11, 1)),
        ],
    )
    def test_parent_created_after_previous_month(self, month, expected):
        assert parent_created_after(month) == expected

    def test_type_only(self):
        assert build_jql(IssueQuery(issue_type="Bug")) == 'type = "Bug"'

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("plain", '"plain"'),
            ('Jane "JD" D', '"Jane \\"JD\\" D"'),
            ("back\\slash", '"back\\\\slash"'),
        ],
    )
    def test_quoting(self, value, expected):
        assert jql_string(value) == expected


class TestAdf:

    def test_document_shape(self):
        assert adf_document("hello") == {
            "version": 1,
            "type": "doc",
            "content": [{"type": "paragraph", "content": [{"type": "text", "text": "hello"}]}],
        }

    def test_text_extraction(self):
        assert adf_text(adf_document("Time tracking for 05.03.2024")) == "Time tracking for 05.03.2024"

    @pytest.mark.parametrize("doc, expected", [(None, ""), ("", ""), ("plain", "plain"), ({}, "")])
    def test_text_edge_cases(self, doc, expected):
        assert adf_text(doc) == expected


class TestIssueFields:

    def test_parent_summary_uses_identity(self):
        assert parent_summary(date(2026, 10, 19), "Jane D") == "Time Tracking October for Jane D"

    def test_parent_fields(self):
        fields = parent_fields("TT", date(2024, 3, 5), "Jane D", "557058:abc")
        assert fields["project"] == {"key": "TT"}
        assert fields["summary"] == "Time Tracking March for Jane D"
        assert fields["issuetype"] == {"name": "Story"}
        assert fields["assignee"] == {"accountId": "557058:abc"}
        assert adf_text(fields["description"]) == "Time tracking tickets for March 2024"
        assert "parent" not in fields

    def test_child_fields(self):
        fields = child_fields("TT", "TT-1", date(2024, 3, 5), "557058:abc")
        assert fields["summary"] == "05.03.2024"
        assert fields["issuetype"] == {"name": "Sub-task"}
        assert fields["parent"] == {"key": "TT-1"}
        assert fields["assignee"] == {"accountId": "557058:abc"}
        assert adf_text(fields["description"]) == "Time tracking for 05.03.2024"
