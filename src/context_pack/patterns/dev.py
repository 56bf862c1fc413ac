"""Development toolchain bloat rules: dependencies, builds, coverage, lock files."""

from __future__ import annotations

from .base import BloatRule, rule

DEV_RULES: tuple[BloatRule, ...] = (
    # Dependency directories
    rule(r"^node_modules(/|$)", "dependencies", "npm packages, never needed in context", "critical"),
    rule(r"^vendor(/|$)", "dependencies", "vendored dependencies, exclude entirely", "critical"),
    rule(r"^\.pnpm(/|$)", "dependencies", "pnpm store, never needed in context", "critical"),
    rule(r"^bower_components(/|$)", "dependencies", "Bower dependencies, exclude entirely", "critical"),

    # Build output
    rule(r"^(dist|build|out|output)(/|$)", "build", "compiled output, Claude reads source, not build", "critical"),
    rule(r"^\.next(/|$)", "build", "Next.js build cache, not source code", "critical"),
    rule(r"^\.nuxt(/|$)", "build", "Nuxt.js build cache", "critical"),
    rule(r"^\.svelte-kit(/|$)", "build", "SvelteKit build cache", "critical"),
    rule(r"^\.vite(/|$)", "build", "Vite cache", "high"),
    rule(r"^\.turbo(/|$)", "build", "Turborepo cache", "high"),
    rule(r"^\.parcel-cache(/|$)", "build", "Parcel build cache", "high"),
    rule(r"^storybook-static(/|$)", "build", "Storybook build output", "high"),

    # Test coverage
    rule(r"^coverage(/|$)", "coverage", "test coverage reports, generated data", "high"),
    rule(r"^\.nyc_output(/|$)", "coverage", "NYC/Istanbul coverage output", "high"),
    rule(r"^htmlcov(/|$)", "coverage", "Python coverage HTML report", "high"),

    # Python
    rule(r"^__pycache__(/|$)", "python", "Python bytecode cache", "critical"),
    rule(r"\.pyc$", "python", "compiled Python bytecode", "critical"),
    rule(
        r"^(venv|\.venv|env|\.env)(/|$)",
        "python",
        "Python virtual environment, use requirements.txt instead",
        "critical",
    ),
    rule(r"^\.tox(/|$)", "python", "tox testing environments", "high"),
    rule(r"\.egg-info(/|$)", "python", "Python package build metadata", "high"),

    # Lock files
    rule(r"^package-lock\.json$", "lockfiles", "npm lock file, thousands of lines of generated JSON", "high"),
    rule(r"^yarn\.lock$", "lockfiles", "Yarn lock file, large generated file", "high"),
    rule(r"^pnpm-lock\.yaml$", "lockfiles", "pnpm lock file, large generated file", "high"),
    rule(r"^Cargo\.lock$", "lockfiles", "Rust lock file, large generated file", "medium"),
    rule(r"^Gemfile\.lock$", "lockfiles", "Ruby lock file, large generated file", "medium"),
    rule(r"^composer\.lock$", "lockfiles", "PHP Composer lock file, large generated file", "medium"),
    rule(r"^poetry\.lock$", "lockfiles", "Poetry lock file, large generated file", "medium"),
    rule(r"^uv\.lock$", "lockfiles", "uv lock file, large generated file", "medium"),
)
