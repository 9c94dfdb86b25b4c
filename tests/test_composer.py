"""Tests for context composition."""

import json

from instruction_scope.composer import JsonContextComposer, MarkdownContextComposer, compose
from instruction_scope.matching.matcher import match


def test_compose_empty_is_empty_string() -> None:
    assert compose([]) == ""


def test_compose_sections_in_order(make_document) -> None:
    a = make_document("typescript", "**/*.ts", body="\nUse strict mode.\n")
    b = make_document("react/components", "**/*.tsx", body="Prefer function components.\n\n")

    assert compose([a, b]) == (
        "## typescript\n"
        "\n"
        "Use strict mode.\n"
        "\n"
        "---\n"
        "\n"
        "## react/components\n"
        "\n"
        "Prefer function components.\n"
    )


def test_compose_single_document(make_document) -> None:
    only = make_document("python", "**/*.py", body="Type hints everywhere.")
    assert compose([only]) == "## python\n\nType hints everywhere.\n"


def test_compose_is_deterministic(make_document) -> None:
    documents = [
        make_document("a", "**/*.ts"),
        make_document("b", "src/**"),
        make_document("c", "**"),
    ]
    first = compose(match(documents, "src/index.ts"))
    second = compose(match(documents, "src/index.ts"))
    assert first == second
    assert first.count("\n---\n") == 2


def test_compose_document_with_empty_body(make_document) -> None:
    document = make_document("blank", "**")
    document = type(document)(
        id=document.id,
        source_path=document.source_path,
        metadata=document.metadata,
        body="   \n",
    )
    assert compose([document]) == "## blank\n"


def test_compose_keeps_leading_indentation(make_document) -> None:
    code = make_document("code", "**/*.py", body="    indented_code()\n")
    assert compose([code]) == "## code\n\n    indented_code()\n"


def test_compose_drops_leading_blank_lines_only(make_document) -> None:
    code = make_document("code", "**/*.py", body="\n  \n\t- nested item\n")
    assert compose([code]) == "## code\n\n\t- nested item\n"


def test_markdown_composer_matches_module_function(make_document) -> None:
    documents = [make_document("a", "**")]
    assert MarkdownContextComposer().compose(documents, "x.ts") == compose(documents)


def test_json_composer_payload(make_document) -> None:
    document = make_document("web", "**/*.ts, **/*.tsx", body="Body.\n", description="Web rules")
    payload = json.loads(JsonContextComposer().compose([document], "src/a.ts"))
    assert payload == {
        "path": "src/a.ts",
        "instructions": [
            {
                "id": "web",
                "description": "Web rules",
                "applyTo": ["**/*.ts", "**/*.tsx"],
                "body": "Body.\n",
            }
        ],
    }


def test_json_composer_empty(make_document) -> None:
    payload = json.loads(JsonContextComposer().compose([], "x"))
    assert payload == {"path": "x", "instructions": []}
