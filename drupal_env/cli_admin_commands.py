"""Project administration commands - init, local, remote, optional-deps."""
import typer
from rich.console import Console
from rich.table import Table

from drupal_env.cli_support import (
    get_task_context,
    handle_cli_error,
    is_verbose,
    print_info,
    print_success,
    print_warning,
)
from drupal_env.core.config_store import DEFAULT_LOCAL_ENVIRONMENT_KEY
from drupal_env.core.errors import DrupalEnvError
from drupal_env.core.local_environments import LOCAL_ENVIRONMENTS

# Module-level console instance (will be set by register function)
console: Console = Console()

OPTIONAL_DEPENDENCIES_FLAG = "flags.installedOptionalDependencies"

OPTIONAL_DEPENDENCIES = {
    "drupal/admin_toolbar": "Easy access at the top of the page to admin only links.",
    "drupal/paragraphs": "Allows site builders to create dynamic content for every entity.",
    "drupal/disable_user_1_edit": "Don't let anyone but user 1 edit the super user.",
    "drupal/menu_admin_per_menu": "Allows granular per-menu access.",
    "drupal/role_delegation": "Allow a role to give only certain roles (don't let them make admins)",
    "drupal/twig_tweak": "Handy shortcuts and helpers when working in Twig",
    "drupal/twig_field_value": "Easily get field values and labels separately in Twig.",
}

OPTIONAL_DEV_DEPENDENCIES = {
    "drupal/devel": "This has many great debugging tools.",
}


def init():
    """Initialize the Drupal environment for this project.

    Creates the config sync directory and installs the dependencies every
    environment needs (drush, and drupal/core-dev for coding standards).
    """
    ctx = get_task_context(console)
    try:
        sync_dir = ctx.project_dir / "config" / "sync"
        if not sync_dir.is_dir():
            print_info(console, "Creating the config sync directory...")
            sync_dir.mkdir(mode=0o755, parents=True, exist_ok=True)

        print_info(console, "Installing required dependencies...")
        installer = ctx.installer()
        installed = installer.install(False, {"drupal/core-dev": "Provides PHP CS"}, dev=True)
        installed = installer.install(False, {"drush/drush": "Required for CLI access to Drupal"}) and installed
    except DrupalEnvError as e:
        handle_cli_error(e, console, is_verbose())
        return

    if not installed:
        print_warning(console, "Some required dependencies failed to install, see the output above.")
        raise typer.Exit(1)

    print_success(console, "Your project is now ready to install remote (none yet) and local environments")
    print_success(console, "Configure one or more local environments: drupal-env local")


def local():
    """Install one local environment at a time."""
    ctx = get_task_context(console)
    try:
        installer = ctx.installer()
        installed = {
            key: installer.is_installed(environment.package)
            for key, environment in LOCAL_ENVIRONMENTS.items()
        }

        table = Table(title="Local environments")
        for column in ("Name", "Installed", "Package", "Post Install Command", "Description"):
            table.add_column(column)
        for key, environment in LOCAL_ENVIRONMENTS.items():
            table.add_row(
                environment.name,
                "Yes, installed" if installed[key] else "Not installed",
                environment.package,
                " ".join(environment.post_install_command),
                environment.description,
            )
        console.print(table)

        options = {key: env.name for key, env in LOCAL_ENVIRONMENTS.items() if not installed[key]}
        if not options:
            print_warning(console, "You have installed all local environments.")
            return

        options["cancel"] = "Cancel"
        choice = ctx.prompter.choice("Which environment do you want to install?", options, default="cancel")
        if choice == "cancel":
            print_warning(console, "Cancelled adding a new local environment.")
            return

        environment = LOCAL_ENVIRONMENTS[choice]
        if not installer.install(False, {environment.package: environment.description}):
            print_warning(console, f"There was an issue installing {environment.package}.")
            raise typer.Exit(1)

        if not ctx.config.get(DEFAULT_LOCAL_ENVIRONMENT_KEY, {}, local=True):
            ctx.config.set(DEFAULT_LOCAL_ENVIRONMENT_KEY, {"type": environment.key}, local=True)
            print_info(console, f"{environment.name} is now your default local environment.")

        if ctx.prompter.confirm(
            "Success! Would you like to continue the installation and configuration of the new local environment"
        ):
            ctx.runner.check(environment.post_install_command)
    except DrupalEnvError as e:
        handle_cli_error(e, console, is_verbose())


def remote():
    """Install a remote environment."""
    print_warning(console, "There are no remotes able to be configured at this time, Platform.sh is coming soon.")


def optional_deps():
    """Offer optional but helpful modules, one question per module."""
    ctx = get_task_context(console)
    try:
        already_run = ctx.config.get(OPTIONAL_DEPENDENCIES_FLAG, 0)
        already_run_label = " You've already run this before." if already_run else ""
        if ctx.prompter.confirm(
            f"Would you like to install some optional but helpful dependencies?{already_run_label}",
            default=not already_run,
        ):
            installer = ctx.installer()
            installer.install(True, OPTIONAL_DEPENDENCIES, dev=False)
            installer.install(True, OPTIONAL_DEV_DEPENDENCIES, dev=True, ask_dev=True)

        if not already_run:
            ctx.config.set(OPTIONAL_DEPENDENCIES_FLAG, 1)
    except DrupalEnvError as e:
        handle_cli_error(e, console, is_verbose())


def register_admin_commands(app: typer.Typer, shared_console: Console) -> None:
    """Register project administration commands with the main Typer app."""
    global console
    console = shared_console

    app.command()(init)
    app.command()(local)
    app.command()(remote)
    app.command("optional-deps")(optional_deps)
