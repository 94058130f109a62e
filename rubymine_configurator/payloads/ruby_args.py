"""RUBY_ARGS patch for test run configurations in .idea/workspace.xml."""

from __future__ import annotations

from rubymine_configurator.document import ContainerSpec
from rubymine_configurator.payloads.models import AttributePatch, RubyArgsFacts, require

RUN_MANAGER = ContainerSpec(value="RunManager", root_tag="project", root_attributes={"version": "4"})


def include_path_args(working_dir: str, include_paths: list[str]) -> str:
    """``-I<dir>/<sub>`` for each include sub-path, space separated."""
    base = working_dir.rstrip("/")
    return " ".join(f"-I{base}/{sub.strip('/')}" for sub in include_paths)


def build_ruby_args_patch(facts: RubyArgsFacts) -> AttributePatch:
    require(facts, "test-args", "working_dir", "include_paths")
    return AttributePatch(
        match_attribute="NAME",
        match_value="RUBY_ARGS",
        value_attribute="VALUE",
        value=include_path_args(facts.working_dir, facts.include_paths),
    )
