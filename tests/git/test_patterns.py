"""Tests for glob matching and service classification."""

from __future__ import annotations

import pytest

from azdocgen.git.patterns import (
    DEFAULT_PATTERNS,
    detect_service_type,
    filter_paths,
    matches,
)
from azdocgen.models import ChangedFile


def test_matches_servicebus_pattern() -> None:
    assert matches("infra/servicebus-queue.json", ["**/servicebus-*.json"]) is True
    assert matches("infra/servicebus-queue.json", ["**/eventhub-*.json"]) is False


def test_double_star_matches_zero_directories() -> None:
    assert matches("function.json", ["**/function.json"])
    assert matches("apps/orders/OnOrder/function.json", ["**/function.json"])


def test_single_star_stays_within_segment() -> None:
    assert matches("bicep/main.bicep", ["**/bicep/*.bicep"])
    assert not matches("bicep/modules/net.bicep", ["**/bicep/*.bicep"])
    assert not matches("infra/apim-policy.xml", ["apim-*.xml"])


def test_question_mark_and_character_class() -> None:
    assert matches("env/a1.tf", ["env/a?.tf"])
    assert not matches("env/a12.tf", ["env/a?.tf"])
    assert matches("env/b.tf", ["env/[ab].tf"])
    assert not matches("env/c.tf", ["env/[ab].tf"])
    assert matches("env/c.tf", ["env/[!ab].tf"])


def test_matching_is_case_sensitive() -> None:
    assert not matches("infra/ServiceBus-queue.json", ["**/servicebus-*.json"])


def test_wildcards_skip_dot_segments() -> None:
    assert not matches(".github/workflows/azure-docs.yml", DEFAULT_PATTERNS)
    assert not matches("infra/.terraform/modules.tf", ["**/*.tf"])
    assert not matches(".azure.yml", ["*azure*.yml"])
    assert not matches(".env", ["?env"])
    assert not matches("infra/.cache/main.bicep", ["infra/**"])
    assert matches("infra/bicep/main.bicep", ["infra/**"])


def test_literal_dot_segments_still_match() -> None:
    assert matches(".github/workflows/azure-docs.yml", [".github/workflows/*.yml"])
    assert matches(".github/workflows/azure-docs.yml", ["**/.github/**/*azure*.yml"])


def test_windows_separators_are_normalised() -> None:
    assert matches("infra\\terraform\\main.tf", ["**/terraform/*.tf"])


@pytest.mark.parametrize(
    "path",
    [
        "workflows/orders.logicapp.json",
        "apim/apim-policy.xml",
        "apim/apim-products.xml",
        "messaging/servicebus-topics.json",
        "messaging/eventhub-telemetry.json",
        "functions/Ingest/function.json",
        "infra/bicep/main.bicep",
        "infra/terraform/main.tf",
        "pipelines/deploy-azure.yml",
        "pipelines/azure-pipelines.yaml",
    ],
)
def test_default_patterns_cover_azure_artifacts(path: str) -> None:
    assert matches(path, DEFAULT_PATTERNS)


def test_default_patterns_ignore_unrelated_files() -> None:
    assert not matches("infra/notes.txt", DEFAULT_PATTERNS)
    assert not matches("src/app.py", DEFAULT_PATTERNS)


def test_filter_paths_preserves_order() -> None:
    files = [
        ChangedFile(path="b/function.json", status="added"),
        ChangedFile(path="README.md", status="modified"),
        ChangedFile(path="a/apim-policy.xml", status="modified"),
    ]

    kept = filter_paths(files, DEFAULT_PATTERNS)

    assert [item.path for item in kept] == ["b/function.json", "a/apim-policy.xml"]


def test_filter_paths_accepts_api_records() -> None:
    records = [{"filename": "infra/servicebus-q.json"}, {"filename": "docs/x.md"}]

    assert filter_paths(records, ["**/servicebus-*.json"]) == [records[0]]


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("flows/orders.logicapp.json", "Azure Logic App"),
        ("flows/logicapp-policy.json", "Azure Logic App"),
        ("apim/apim-policy.xml", "API Management"),
        ("gateway/policy.xml", "API Management"),
        ("messaging/servicebus-q.json", "Service Bus"),
        ("messaging/eventhub-t.json", "Event Hub"),
        ("apps/Ingest/function.json", "Azure Function"),
        ("infra/main.bicep", "Bicep IaC"),
        ("infra/main.tf", "Terraform IaC"),
        ("ci/azure-pipelines.yml", "Azure Configuration"),
        ("infra/notes.txt", "Azure Integration"),
    ],
)
def test_detect_service_type_precedence(filename: str, expected: str) -> None:
    assert detect_service_type(filename) == expected
