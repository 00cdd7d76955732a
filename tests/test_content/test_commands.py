"""Tests for content CLI commands."""

import json

from click.testing import CliRunner

from folio.content.commands import content


# ---------------------------------------------------------------------------
# content list
# ---------------------------------------------------------------------------

def test_list_shows_content(academic_site):
    runner = CliRunner()
    result = runner.invoke(content, ["list"])

    assert result.exit_code == 0
    assert "bayesian-workflow" in result.output
    assert "mixed-models" in result.output
    assert "phd-position" in result.output


def test_list_json(academic_site):
    runner = CliRunner()
    result = runner.invoke(content, ["list", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    slugs = {d["slug"]: d for d in data}
    assert set(slugs) == {"admin", "bayesian-workflow", "mixed-models", "phd-position"}
    assert slugs["bayesian-workflow"]["hugo_path"] == "/post/bayesian-workflow/"
    assert slugs["bayesian-workflow"]["tags"] == ["bayesian", "workflow"]


def test_list_filter_by_type(academic_site, create_content_file):
    create_content_file(slug="wip", draft=True)
    runner = CliRunner()

    result = runner.invoke(content, ["list", "--type", "post", "--json"])
    assert [d["slug"] for d in json.loads(result.output)] == ["bayesian-workflow"]

    result = runner.invoke(content, ["list", "-t", "post", "--include-drafts", "--json"])
    assert sorted(d["slug"] for d in json.loads(result.output)) == ["bayesian-workflow", "wip"]


def test_list_empty(mock_site_root):
    runner = CliRunner()
    result = runner.invoke(content, ["list"])

    assert result.exit_code == 0
    assert "No content found" in result.output


# ---------------------------------------------------------------------------
# content show
# ---------------------------------------------------------------------------

def test_show_by_slug(academic_site):
    runner = CliRunner()
    result = runner.invoke(content, ["show", "bayesian-workflow"])

    assert result.exit_code == 0
    assert "A Bayesian Workflow" in result.output
    assert "/post/bayesian-workflow/" in result.output


def test_show_json_includes_front_matter(academic_site):
    runner = CliRunner()
    result = runner.invoke(content, ["show", "/phd-position/", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["kind"] == "page"
    assert data["front_matter"]["type"] == "page"
    assert data["front_matter"]["share"] is False
    # YAML dates are serialized as strings
    assert data["front_matter"]["date"] == "2021-03-01"


def test_show_broken_document(academic_site, create_raw_file):
    create_raw_file("content/post/broken.md", "Just text.\n")
    runner = CliRunner()
    result = runner.invoke(content, ["show", "broken"])

    assert result.exit_code == 0
    assert "No front matter" in result.output


def test_show_not_found(academic_site):
    runner = CliRunner()
    result = runner.invoke(content, ["show", "does-not-exist"])

    assert result.exit_code == 1
    assert "No content found" in result.output


# ---------------------------------------------------------------------------
# content stats
# ---------------------------------------------------------------------------

def test_stats_json(academic_site):
    runner = CliRunner()
    result = runner.invoke(content, ["stats", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["total"] == 4
    assert data["by_kind"]["post"] == 1
    assert data["parse_failures"] == 0


def test_stats_table(academic_site):
    runner = CliRunner()
    result = runner.invoke(content, ["stats"])

    assert result.exit_code == 0
    assert "Total documents" in result.output


# ---------------------------------------------------------------------------
# content audit
# ---------------------------------------------------------------------------

def test_audit_list_checks(mock_site_root):
    runner = CliRunner()
    result = runner.invoke(content, ["audit", "--list-checks"])

    assert result.exit_code == 0
    assert "author_refs" in result.output
    assert "render_drift" in result.output


def test_audit_clean_site(academic_site):
    runner = CliRunner()
    result = runner.invoke(content, ["audit"])

    assert result.exit_code == 0
    assert "Audit passed" in result.output


def test_audit_errors_exit_nonzero(academic_site, create_content_file):
    create_content_file(slug="guest", extra_fm={"authors": ["John Smith"], "tags": ["x"]})
    runner = CliRunner()
    result = runner.invoke(content, ["audit"])

    assert result.exit_code == 1
    assert "John Smith" in result.output
    assert "[author_refs]" in result.output


def test_audit_json(academic_site, create_content_file):
    create_content_file(slug="guest", extra_fm={"authors": ["John Smith"], "tags": ["x"]})
    runner = CliRunner()
    result = runner.invoke(content, ["audit", "--json"])

    assert result.exit_code == 1
    data = json.loads(result.output)
    assert data["by_check"] == {"author_refs": 1}
    assert data["issues"][0]["extra"] == {"reference": "John Smith"}


def test_audit_warnings_exit_zero(academic_site, create_content_file):
    create_content_file(slug="tagged", extra_fm={"tags": ["R", "R"]})
    runner = CliRunner()
    result = runner.invoke(content, ["audit", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["by_severity"] == {"warning": 1}


def test_audit_check_and_severity_options(academic_site, create_content_file):
    create_content_file(slug="untagged", extra_fm={"authors": ["nobody"]})
    runner = CliRunner()

    result = runner.invoke(content, ["audit", "--check", "orphaned_content", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["checks_run"] == ["orphaned_content"]

    result = runner.invoke(content, ["audit", "--severity", "error", "--json"])
    assert result.exit_code == 1
    assert json.loads(result.output)["by_severity"] == {"error": 1}


def test_audit_type_filter(academic_site, create_raw_file):
    create_raw_file("content/talk/bad.md", "---\ntitle: Talk\n---\n")
    runner = CliRunner()

    assert runner.invoke(content, ["audit", "--type", "post"]).exit_code == 0
    assert runner.invoke(content, ["audit", "--type", "talk"]).exit_code == 1


def test_audit_verbose_shows_warnings(academic_site, create_content_file):
    create_content_file(slug="tagged", extra_fm={"tags": ["R", "R"]})
    runner = CliRunner()

    result = runner.invoke(content, ["audit"])
    assert "Use --verbose" in result.output

    result = runner.invoke(content, ["audit", "--verbose"])
    assert "listed 2 times" in result.output
    assert "Issues by Check" in result.output


def test_audit_summary_only(academic_site, create_content_file):
    create_content_file(slug="guest", extra_fm={"authors": ["John Smith"], "tags": ["x"]})
    runner = CliRunner()
    result = runner.invoke(content, ["audit", "--summary-only"])

    assert result.exit_code == 1
    assert "Audit Summary" in result.output
    assert "John Smith" not in result.output


# ---------------------------------------------------------------------------
# Front matter text containing console markup
# ---------------------------------------------------------------------------

def test_markup_in_front_matter_printed_literally(academic_site, create_content_file):
    create_content_file(
        slug="priors",
        title="Priors [/b] explained",
        extra_fm={"tags": ["[red]"], "summary": "Why [bold]weak[/bold] priors"},
    )
    runner = CliRunner()

    listed = runner.invoke(content, ["list"])
    assert listed.exit_code == 0, listed.output
    assert "[/b]" in listed.output

    shown = runner.invoke(content, ["show", "priors"])
    assert shown.exit_code == 0, shown.output
    assert "Priors [/b] explained" in shown.output
    assert "Tags: [red]" in shown.output
    assert "[bold]weak[/bold]" in shown.output


def test_markup_in_audit_output(academic_site, create_content_file):
    create_content_file(
        slug="priors",
        title="Priors [/b] explained",
        extra_fm={"authors": ["[/i]nobody"], "tags": ["x"]},
    )
    runner = CliRunner()
    result = runner.invoke(content, ["audit"])

    assert result.exit_code == 1
    assert "Priors [/b] explained" in result.output
    assert "[/i]nobody" in result.output
