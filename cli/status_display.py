"""Final deployment report"""

from rich.panel import Panel
from rich.table import Table

from provisioning import DeploymentReport
from provisioning.pipeline import d1_database_name

D1_INIT_SQL = (
    "CREATE TABLE IF NOT EXISTS users (uuid TEXT PRIMARY KEY, created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP, "
    "expiration_date TEXT NOT NULL, expiration_time TEXT NOT NULL, notes TEXT, data_limit INTEGER DEFAULT 0, "
    "data_usage INTEGER DEFAULT 0, ip_limit INTEGER DEFAULT 2);"
)


def show_report(report: DeploymentReport, console) -> None:
    """
    Display the outcome of a deployment

    Args:
        report: Report returned by the provisioner
        console: Rich console for output
    """
    resources = report.resources

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="cyan", width=20)
    table.add_column()

    table.add_row("Worker:", resources.script_name or "-")
    table.add_row("KV Namespace ID:", resources.namespace_id or "-")
    table.add_row("D1 Database ID:", resources.database_id or "-")
    if resources.custom_hostname:
        table.add_row("Custom Domain:", resources.custom_hostname)
    if resources.workers_subdomain:
        table.add_row("workers.dev:", f"{resources.script_name}.{resources.workers_subdomain}")
    if report.panel_url:
        table.add_row("Admin Panel:", f"[bold green]{report.panel_url}[/bold green]")

    console.print()
    console.print(Panel.fit(table, title="[bold green]✓ Deployment Successful[/bold green]", border_style="green"))

    for warning in report.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")

    console.print("\nPlease wait a minute for all changes to propagate.")
    console.print("Initialize the D1 database with wrangler on your local machine:")
    console.print(
        f"[dim]wrangler d1 execute {d1_database_name(resources.script_name)} --remote "
        f"--command=\"{D1_INIT_SQL}\"[/dim]"
    )
