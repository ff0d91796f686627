import argparse
import logging
from morpholabels import configs
from morpholabels.utils.logging_utils import load_cmdline_logging_config
from rich.prompt import Prompt, Confirm
from rich.console import Console

# Create console for user output and logger for developer debugging
console = Console()
_LOGGER = logging.getLogger(__name__)


def _is_valid_url(url: str) -> bool:
    return url.startswith('http://') or url.startswith('https://')


def _parse_timeout(value: str) -> float | None:
    try:
        timeout = float(value)
    except ValueError:
        return None
    return timeout if timeout > 0 else None


def configure_default_url():
    """Configure the default server URL interactively."""
    current = configs.get_value(configs.APIURL_KEY) or 'Not set'
    console.print(f"Current default URL: [cyan]{current}[/cyan]")
    url = Prompt.ask("Enter the default server URL (leave empty to abort)").strip()
    if url == '':
        return

    # Basic URL validation
    if not _is_valid_url(url):
        console.print("[yellow]⚠️  URL should start with http:// or https://[/yellow]")
        return

    configs.set_value(configs.APIURL_KEY, url)
    console.print("[green]✅ Default URL set successfully.[/green]")


def configure_timeout():
    """Configure the request timeout interactively."""
    current = configs.get_value(configs.TIMEOUT_KEY) or 'Not set'
    console.print(f"Current timeout: [cyan]{current}[/cyan]")
    value = Prompt.ask("Enter the request timeout in seconds (leave empty to abort)").strip()
    if value == '':
        return
    timeout = _parse_timeout(value)
    if timeout is None:
        console.print("[yellow]⚠️  Timeout must be a positive number of seconds[/yellow]")
        return
    configs.set_value(configs.TIMEOUT_KEY, timeout)
    console.print("[green]✅ Timeout set successfully.[/green]")


def show_all_configurations():
    """Display all current configurations in a user-friendly format."""
    config = configs.read_config()
    if config is not None and len(config) > 0:
        console.print("[bold]📋 Current configurations:[/bold]")
        for key, value in config.items():
            console.print(f"  [cyan]{key}[/cyan]: {value}")
    else:
        console.print("[dim]No configurations found.[/dim]")


def clear_all_configurations():
    """Clear all configurations with confirmation."""
    yesno = Confirm.ask('Are you sure you want to clear all configurations?',
                        default=True)
    if yesno:
        configs.clear_all_configurations()
        console.print("[green]✅ All configurations cleared.[/green]")


def test_connection():
    """Test the connection by loading the annotation statistics of a media item."""
    from morpholabels.api.client import Api
    from morpholabels.api.scope import AnnotationScope

    project_id = Prompt.ask("Project id").strip()
    media_id = Prompt.ask("Media id").strip()
    published = Confirm.ask("Is the project published?", default=False)
    console.print("[blue]🔄 Testing connection...[/blue]")
    with Api() as api:
        stats = api.annotations.get_stats(AnnotationScope(project_id=project_id,
                                                          media_id=media_id,
                                                          published=published))
    if stats.ok:
        console.print(f"[green]✅ Connection successful! Found {stats.total} annotations.[/green]")
    else:
        console.print(f"[red]❌ Connection failed: {stats.error}[/red]")
        console.print("[dim]💡 Check your URL settings and the project/media ids[/dim]")


def interactive_mode():
    console.print("[bold blue]🔧 morpholabels Configuration Tool[/bold blue]")

    while True:
        console.print("\n[bold]📋 Select the action you want to perform:[/bold]")
        console.print(" [cyan](1)[/cyan] Configure the default URL")
        console.print(" [cyan](2)[/cyan] Configure the request timeout")
        console.print(" [cyan](3)[/cyan] Show all configuration settings")
        console.print(" [cyan](4)[/cyan] Clear all configuration settings")
        console.print(" [cyan](5)[/cyan] Test connection")
        console.print(" [cyan](q)[/cyan] Exit")
        choice = Prompt.ask("Enter your choice").lower().strip()

        if choice == '1':
            configure_default_url()
        elif choice == '2':
            configure_timeout()
        elif choice == '3':
            show_all_configurations()
        elif choice == '4':
            clear_all_configurations()
        elif choice == '5':
            test_connection()
        elif choice in ('q', 'exit', 'quit'):
            console.print("[green]👋 Goodbye![/green]")
            break
        else:
            console.print("[red]❌ Invalid choice. Please enter a number between 1 and 5 or 'q' to quit.[/red]")


def main():
    load_cmdline_logging_config()
    parser = argparse.ArgumentParser(
        description='🔧 morpholabels Configuration Tool',
        epilog="""
Examples:
  morpholabels-config                                   # Interactive mode
  morpholabels-config --url https://morphobank.org      # Set the default server URL
  morpholabels-config --timeout 60                      # Set the request timeout
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--default-url', '--url', type=str, help='Default server URL to set')
    parser.add_argument('--timeout', type=str, help='Request timeout to set, in seconds')
    parser.add_argument('--show', action='store_true', help='Show all configuration settings')
    parser.add_argument('-i', '--interactive', action='store_true',
                        help='Interactive mode (default if no other arguments provided)')

    args = parser.parse_args()

    if args.default_url is not None:
        # Basic URL validation
        if not _is_valid_url(args.default_url):
            console.print("[red]❌ URL must start with http:// or https://[/red]")
            return
        configs.set_value(configs.APIURL_KEY, args.default_url)
        console.print("[green]✅ Default URL saved.[/green]")

    if args.timeout is not None:
        timeout = _parse_timeout(args.timeout)
        if timeout is None:
            console.print("[red]❌ Timeout must be a positive number of seconds[/red]")
            return
        configs.set_value(configs.TIMEOUT_KEY, timeout)
        console.print("[green]✅ Timeout saved.[/green]")

    if args.show:
        show_all_configurations()

    no_arguments_provided = args.default_url is None and args.timeout is None and not args.show

    if no_arguments_provided or args.interactive:
        interactive_mode()


if __name__ == "__main__":
    main()
