"""Recognised command options — shared baseline plus per-domain additions.

Every command accepts the baseline options (``--verbose``,
``--dry-run``, ``--config``).  Domains whose handlers drive external
tools get additional options from :data:`DOMAIN_OPTIONS`, keyed by
``(domain, action)`` where an action of ``None`` applies to the whole
domain.  Augmentation is purely additive: an entry that would redefine
a baseline flag or destination is reported and dropped, never merged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

OPTION_KINDS: frozenset[str] = frozenset({"value", "optional", "flag", "toggle", "negated"})


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """Declarative description of one command-line option.

    ``kind`` selects the parsing behaviour:

    * ``value`` — takes one argument (``--tag latest``)
    * ``optional`` — argument may be omitted, yielding ``const``
    * ``flag`` — boolean switch (``--force``)
    * ``toggle`` — ``--x`` / ``--no-x`` pair
    * ``negated`` — a lone ``--no-x`` switch defaulting to ``True``
    """

    flags: tuple[str, ...]
    help: str
    kind: str = "flag"
    default: Any = None
    metavar: str | None = None
    const: Any = None

    @property
    def option_strings(self) -> tuple[str, ...]:
        """Every flag the option occupies, including generated negations."""
        if self.kind != "toggle":
            return self.flags
        return (*self.flags, f"--no-{self.dest.replace('_', '-')}")

    @property
    def dest(self) -> str:
        long_flag = next((flag for flag in self.flags if flag.startswith("--")), self.flags[0])
        name = long_flag.lstrip("-")
        if self.kind == "negated" and name.startswith("no-"):
            name = name[3:]
        return name.replace("-", "_")


def _value(*flags: str, help: str, default: Any = None, metavar: str = "VALUE") -> OptionSpec:
    return OptionSpec(flags=flags, help=help, kind="value", default=default, metavar=metavar)


def _flag(*flags: str, help: str) -> OptionSpec:
    return OptionSpec(flags=flags, help=help, kind="flag", default=False)


def _toggle(*flags: str, help: str, default: bool = True) -> OptionSpec:
    return OptionSpec(flags=flags, help=help, kind="toggle", default=default)


BASELINE_OPTIONS: tuple[OptionSpec, ...] = (
    _flag("-v", "--verbose", help="Enable verbose logging"),
    _flag("--dry-run", help="Show what would be done without executing"),
    _value("--config", help="Path to configuration file", metavar="PATH"),
)


# ---------------------------------------------------------------------------
# Per-domain additions
# ---------------------------------------------------------------------------

_PROJECT_CREATE = (
    _value("-f", "--framework", help="Framework to use (react, nextjs, vue, angular, svelte)", default="nextjs", metavar="FRAMEWORK"),
    _value("-p", "--platform", help="Target platform (web, mobile, desktop)", default="web", metavar="PLATFORM"),
    _value("--package-manager", help="Package manager (npm, yarn, pnpm, bun)", default="pnpm", metavar="MANAGER"),
    _value("--theme", help="UI theme to use", default="default", metavar="THEME"),
    _value("--bundle", help="Service bundle (saas-starter, e-commerce, cms, dashboard)", metavar="BUNDLE"),
    _flag("--norwegian", help="Enable Norwegian compliance features"),
    _flag("--gdpr", help="Enable GDPR compliance features"),
    _value("--backend", help="Backend type (nestjs, express, fastify, nodejs)", metavar="BACKEND"),
    _flag("--fullstack", help="Create a full-stack application"),
)

_APP_CREATE = (
    _value("-f", "--framework", help="Framework to use (react, nextjs, vue, angular, svelte)", default="nextjs", metavar="FRAMEWORK"),
    _value("-p", "--platform", help="Target platform (web, mobile, desktop)", default="web", metavar="PLATFORM"),
    _value("--package-manager", help="Package manager (npm, yarn, pnpm, bun)", default="pnpm", metavar="MANAGER"),
    _value("--template", help="App template to use", metavar="TEMPLATE"),
)

_MAKE = (
    _flag("--ai", help="Enable AI-powered generation"),
    _value("--description", help="Describe what you want to build", metavar="DESC"),
    _flag("--test", help="Generate unit tests"),
    _flag("--with-stories", help="Generate Storybook stories"),
    _value("--accessibility", help="Accessibility level (A, AA, AAA)", default="AAA", metavar="LEVEL"),
    _flag("--norwegian", help="Enable Norwegian compliance"),
    _flag("--gdpr", help="Enable GDPR compliance"),
    _value("--styling", help="Styling approach (tailwind, css-modules, styled-components)", default="tailwind", metavar="TYPE"),
    _value("--features", help="Comma-separated list of features", metavar="FEATURES"),
    _flag("--migration", help="Create migration file (for models)"),
    _flag("--controller", help="Create controller (for models)"),
    _flag("--resource", help="Create resource controller"),
    _flag("--factory", help="Create factory file"),
    _flag("--seeder", help="Create seeder file"),
    _flag("--all", help="Create all related files"),
    _flag("--api", help="Create API-only controller"),
    _flag("--force", help="Force overwrite existing files"),
)

_MCP = (
    _value("--server", help="MCP server URL to connect to", metavar="URL"),
    _value("--path", help="Project path to analyze", metavar="PATH"),
    _value("--category", help="Filter suggestions by category (architecture, performance, security, accessibility)", metavar="CATEGORY"),
    _value("--platform", help="Target platform (react, nextjs, vue, angular, svelte)", default="react", metavar="PLATFORM"),
    _flag("--all", help="Generate for all platforms"),
    _value("--platforms", help="Comma-separated list of platforms", metavar="PLATFORMS"),
    _value("--name", help="Component name to generate", metavar="NAME"),
)

_MCP_TEST = (
    _value("--suites", help="Test suites to run (comma-separated)", default="connectivity,authentication,api-endpoints,response-validation", metavar="SUITES"),
    _value("--timeout", help="Test timeout in milliseconds", default="30000", metavar="MS"),
    _value("--retry", help="Number of retry attempts", default="2", metavar="ATTEMPTS"),
    _flag("--parallel", help="Run tests in parallel"),
    _value("--format", help="Output format (json, junit, html, console)", default="console", metavar="FORMAT"),
    _value("--output", help="Output file path for reports", metavar="PATH"),
    _flag("--fail-fast", help="Stop on first failure"),
    _flag("--coverage", help="Enable test coverage"),
    _flag("--benchmark", help="Enable benchmarking"),
)

_TEMPLATES_MODERNIZE = (
    _value("-t", "--target", help="Target template files (glob pattern)", default="**/*.hbs", metavar="PATTERN"),
    _value("-o", "--output", help="Output directory for modernized templates", default="./modernized-templates", metavar="DIRECTORY"),
    _value("-w", "--wcag-level", help="WCAG compliance level (A, AA, AAA)", default="AAA", metavar="LEVEL"),
    _value("-n", "--nsm-classification", help="NSM security classification", default="OPEN", metavar="LEVEL"),
    _toggle("--auto-fix", help="Automatically fix issues where possible"),
    _flag("--examples", help="Generate modernization examples"),
    _flag("--analyze", help="Only analyze templates without modernizing"),
    _toggle("--report", help="Generate comprehensive report"),
)

_DEPLOY = (
    _value("-n", "--name", help="Application name", metavar="NAME"),
    _value("-t", "--type", help="Project type (nodejs, nextjs, nestjs, express)", metavar="TYPE"),
    _value("-p", "--package-manager", help="Package manager (npm, yarn, pnpm, bun)", metavar="MANAGER"),
    _value("-s", "--strategy", help="Deployment strategy (rolling, blue-green, canary)", metavar="STRATEGY"),
    _value("-r", "--registry", help="Container registry", metavar="REGISTRY"),
    _value("--repository", help="Container repository", metavar="REPOSITORY"),
    _value("--namespace", help="Kubernetes namespace", metavar="NAMESPACE"),
    _value("-e", "--environment", help="Target environment (dev, staging, prod)", metavar="ENV"),
    _flag("--monitoring", help="Enable monitoring and observability"),
    _flag("--compliance", help="Enable Norwegian compliance features"),
    _value("-o", "--output", help="Output directory", default="./deployment", metavar="PATH"),
    OptionSpec(flags=("--no-interactive",), help="Disable interactive mode", kind="negated", default=True),
)

_ROLLBACK = OptionSpec(
    flags=("--rollback",),
    help="Roll back, optionally to a specific revision",
    kind="optional",
    metavar="REVISION",
    const="previous",
)
_APP_NAME = _value("--app-name", help="Application name", metavar="NAME")

_SECURITY_AUDIT = (
    _value("--tools", help="Security tools to use (comma-separated)", default="npm-audit,eslint-security", metavar="TOOLS"),
    _value("--standards", help="Compliance standards to check (comma-separated)", default="owasp", metavar="STANDARDS"),
    _value("--classification", help="NSM security classification level", default="OPEN", metavar="LEVEL"),
    _value("--format", help="Output format (json, html, markdown, all)", default="html", metavar="FORMAT"),
    _value("--severity", help="Minimum severity level (low, medium, high, critical, all)", default="medium", metavar="LEVEL"),
    _value("--output", help="Output directory for reports", metavar="DIR"),
    _toggle("--scan-code", help="Scan source code for vulnerabilities"),
    _toggle("--scan-deps", help="Scan dependencies for vulnerabilities"),
    _toggle("--scan-config", help="Scan configuration files"),
    _flag("--include-snyk", help="Include Snyk vulnerability scanning"),
    _flag("--include-sonarqube", help="Include SonarQube analysis"),
    _toggle("--include-eslint", help="Include ESLint security analysis"),
    _toggle("--include-custom", help="Include custom security rules"),
    _flag("--interactive", help="Interactive mode with guided prompts"),
)

_SECURITY_SCAN = (
    _value("-t", "--types", help="Scan types: code, dependencies, secrets, configuration, compliance", default="code,dependencies,secrets", metavar="TYPES"),
    _value("-s", "--severity", help="Severity levels to include", default="critical,high,medium", metavar="LEVELS"),
    _value("-c", "--compliance", help="Compliance standards to check: owasp, nsm, gdpr, wcag", default="owasp", metavar="STANDARDS"),
    _toggle("--ai-enhanced", help="AI-powered security analysis"),
    _value("-f", "--format", help="Report format: json, html, markdown, sarif", default="json", metavar="FORMAT"),
    _value("-o", "--output", help="Output file path for the report", metavar="PATH"),
    _value("--exclude", help="Comma-separated patterns to exclude", metavar="PATTERNS"),
    _value("--max-file-size", help="Maximum file size to scan (KB)", default="1024", metavar="KB"),
    _value("--timeout", help="Scan timeout in milliseconds", default="300000", metavar="MS"),
)

DOMAIN_OPTIONS: Mapping[tuple[str, str | None], tuple[OptionSpec, ...]] = {
    ("project", "create"): _PROJECT_CREATE,
    ("app", "create"): _APP_CREATE,
    ("make", None): _MAKE,
    ("mcp", None): _MCP,
    ("mcp", "test"): _MCP_TEST,
    ("templates", "modernize"): _TEMPLATES_MODERNIZE,
    ("deploy", None): _DEPLOY,
    ("deploy", "version"): (
        _flag("--current", help="Show current version"),
        _flag("--next", help="Show next version"),
        _flag("--release", help="Create a new release"),
    ),
    ("deploy", "docker"): (
        _flag("--build", help="Build Docker image"),
        _flag("--scan", help="Scan image for vulnerabilities"),
        _value("--tag", help="Image tag", default="latest", metavar="TAG"),
        _value("--platform", help="Target platforms (comma-separated)", default="linux/amd64", metavar="PLATFORMS"),
    ),
    ("deploy", "kubernetes"): (
        _flag("--apply", help="Apply manifests to cluster"),
        _flag("--status", help="Get deployment status"),
        _value("--scale", help="Scale deployment", metavar="REPLICAS"),
        _ROLLBACK,
        _APP_NAME,
    ),
    ("deploy", "helm"): (
        _flag("--install", help="Install/upgrade Helm release"),
        _flag("--uninstall", help="Uninstall Helm release"),
        _flag("--status", help="Get release status"),
        _flag("--test", help="Run Helm tests"),
        _ROLLBACK,
        _value("--release-name", help="Helm release name", metavar="NAME"),
        _value("--chart-path", help="Path to Helm chart", default="./deployment/helm", metavar="PATH"),
    ),
    ("deploy", "monitoring"): (
        _flag("--setup", help="Setup monitoring stack"),
        _flag("--health", help="Check application health"),
        _flag("--metrics", help="Get metrics summary"),
        _APP_NAME,
    ),
    ("deploy", "status"): (_APP_NAME,),
    ("security", "audit"): _SECURITY_AUDIT,
    ("security", "scan"): _SECURITY_SCAN,
}


# ---------------------------------------------------------------------------
# Resolution and validation
# ---------------------------------------------------------------------------

def _candidates(
    domain: str,
    action: str | None,
    table: Mapping[tuple[str, str | None], tuple[OptionSpec, ...]],
) -> Iterable[OptionSpec]:
    yield from BASELINE_OPTIONS
    yield from table.get((domain, None), ())
    if action is not None:
        yield from table.get((domain, action), ())


def _merge(specs: Iterable[OptionSpec]) -> tuple[list[OptionSpec], list[str]]:
    accepted: list[OptionSpec] = []
    problems: list[str] = []
    seen_flags: set[str] = set()
    seen_dests: set[str] = set()

    for spec in specs:
        if spec.kind not in OPTION_KINDS:
            problems.append(f"{spec.flags[0]}: unknown option kind {spec.kind!r}")
            continue
        clashing = [flag for flag in spec.option_strings if flag in seen_flags]
        if clashing:
            problems.append(f"{spec.flags[-1]}: flag {clashing[0]} already defined")
            continue
        if spec.dest in seen_dests:
            problems.append(f"{spec.flags[-1]}: destination {spec.dest!r} already defined")
            continue
        accepted.append(spec)
        seen_flags.update(spec.option_strings)
        seen_dests.add(spec.dest)

    return accepted, problems


def options_for(
    domain: str,
    action: str,
    table: Mapping[tuple[str, str | None], tuple[OptionSpec, ...]] = DOMAIN_OPTIONS,
) -> tuple[OptionSpec, ...]:
    """Return baseline + domain-wide + action-specific options.

    Conflicting additions are dropped; the baseline is always kept
    intact.  :func:`validate_option_table` reports what was dropped.
    """
    accepted, problems = _merge(_candidates(domain, action, table))
    for problem in problems:
        logger.debug("Dropped option for %s %s: %s", domain, action, problem)
    return tuple(accepted)


def validate_option_table(
    table: Mapping[tuple[str, str | None], tuple[OptionSpec, ...]] = DOMAIN_OPTIONS,
) -> list[str]:
    """Return every conflict in *table*; an empty list means valid."""
    problems: list[str] = []
    for domain, action in table:
        _, found = _merge(_candidates(domain, action, table))
        if action is not None:
            # Domain-wide conflicts are reported under the domain entry.
            _, inherited = _merge(_candidates(domain, None, table))
            found = [problem for problem in found if problem not in inherited]
        label = f"{domain} {action}" if action else f"{domain} (all actions)"
        problems.extend(f"{label}: {problem}" for problem in found)
    return problems
