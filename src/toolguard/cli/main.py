"""AsyncClick CLI for permission and sandbox checks.

Provides user-facing commands:
- assess: Classify the risk of an operation on a resource
- validate: Check a path against the resource rules and sandbox policy
- check: Run a permission request through a PermissionManager
"""

import json

import asyncclick as click
import structlog

from toolguard.core.config import build_permission_manager, build_sandbox_validator, load_config
from toolguard.core.logging_config import configure_logging
from toolguard.core.safety import (
    Permission,
    PermissionMode,
    PermissionRequest,
    SandboxViolation,
    assess_risk,
    console_prompt_handler,
    get_risk_description,
    validate_resource,
)

logger = structlog.get_logger()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
async def cli(ctx, verbose: bool):
    """toolguard - permission checks for agent tools"""
    ctx.ensure_object(dict)
    configure_logging("DEBUG" if verbose else "WARNING")


@cli.command()
@click.argument("operation")
@click.argument("resource", default="")
async def assess(operation: str, resource: str):
    """Assess the risk of OPERATION on RESOURCE.

    Examples:
        toolguard assess "write file" /tmp/notes.txt
        toolguard assess "rm -rf /"
    """
    risk = assess_risk(operation, resource)
    click.echo(f"[*] Risk: {risk.value.upper()}")
    click.echo(f"[*] {get_risk_description(risk)}")


@cli.command()
@click.argument("path")
@click.option("--allow", "-a", multiple=True, help="Allowed path prefix (repeatable)")
@click.option("--deny", "-d", multiple=True, help="Denied path prefix (repeatable)")
@click.pass_context
async def validate(ctx, path: str, allow: tuple[str, ...], deny: tuple[str, ...]):
    """Validate PATH against resource rules and the sandbox policy.

    Prefixes given on the command line are added to the configured ones.

    Examples:
        toolguard validate ./src/app.py
        toolguard validate /home/me/notes.txt -a /home -d /home/me/.ssh
    """
    sandbox = build_sandbox_validator(load_config())
    for prefix in allow:
        sandbox.add_allowed_path(prefix)
    for prefix in deny:
        sandbox.add_denied_path(prefix)

    try:
        validate_resource(path)
        sandbox.validate_path(path)
    except SandboxViolation as e:
        click.echo(f"[-] {e.reason}")
        ctx.exit(1)

    click.echo(f"[+] Path allowed: {path}")


@cli.command()
@click.argument("permission", type=click.Choice([p.value for p in Permission]))
@click.argument("resource")
@click.option("--operation", "-o", default=None, help="Operation description (default: '<permission> <resource>')")
@click.option("--tool", "-t", default="cli", help="Tool name recorded in the audit entry")
@click.option("--mode", "-m", type=click.Choice([m.value for m in PermissionMode]), default=None,
              help="Permission mode (default: from configuration)")
@click.pass_context
async def check(ctx, permission: str, resource: str, operation: str | None, tool: str, mode: str | None):
    """Request PERMISSION on RESOURCE and print the decision.

    In interactive mode the decision is prompted for on the console.

    Examples:
        toolguard check write /tmp/notes.txt
        toolguard check execute "git push" --mode auto
    """
    config = load_config()
    if mode is not None:
        config.mode = PermissionMode(mode)

    manager = await build_permission_manager(config, console_prompt_handler)

    operation = operation or f"{permission} {resource}"
    request = PermissionRequest(
        permission=Permission(permission),
        resource=resource,
        operation=operation,
        risk=assess_risk(operation, resource),
        tool_name=tool,
    )

    try:
        granted = await manager.check(request, {"description": "toolguard CLI check"})
    except (EOFError, KeyboardInterrupt):
        click.echo("\n[-] Permission prompt aborted")
        ctx.exit(1)

    click.echo(f"\n[{'+' if granted else '-'}] {'Granted' if granted else 'Denied'}: "
               f"{permission} on {resource} (risk: {request.risk.value})")
    for entry in manager.get_audit_log():
        click.echo(json.dumps(entry.to_dict()))

    if not granted:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
