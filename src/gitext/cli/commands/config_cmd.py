"""Top-level ``gitext config`` command.

Shows the policy resolved from ``.gitext`` plus defaults, so operators can
see which branches and commands the workflows will act on.
"""

from __future__ import annotations

from rich.table import Table

from gitext.cli.helpers import console, fail
from gitext.core.constants import CONFIG_FILENAME, TARGETS
from gitext.core.errors import GitextError
from gitext.core.policy import Policy, load_policy


def _policy_table(policy: Policy) -> Table:
    table = Table(title="gitext policy", show_lines=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="bold")

    table.add_row("branch.production", policy.production_branch)
    table.add_row("branch.stage", policy.stage_branch)
    table.add_row("naming.feature", policy.feature_pattern)
    table.add_row("naming.hotfix", policy.hotfix_pattern)
    table.add_row("remote.name", policy.remote_name)
    table.add_row("safety.sharedBranchWindow", str(policy.shared_branch_window))
    table.add_row(
        "merge.requireRetargetForProdFromStage",
        "yes" if policy.require_retarget_for_prod_from_stage else "no",
    )
    for target in TARGETS:
        commands = policy.ci_for(target)
        table.add_row(f"ci.{target}", "\n".join(commands) if commands else "[dim]none[/dim]")
    table.add_row("pr.templatePath", policy.pr_template_path or "[dim]none[/dim]")
    return table


def config() -> None:
    """Display the resolved gitext configuration."""
    try:
        policy = load_policy()
    except GitextError as e:
        fail(e)

    if policy.repo_root is not None:
        config_file = policy.repo_root / CONFIG_FILENAME
        source = str(config_file) if config_file.exists() else "defaults (no .gitext found)"
        console.print(f"[dim]Source:[/dim] {source}")
    console.print(_policy_table(policy))
